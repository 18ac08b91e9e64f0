"""
AAC 映射注册表：类别集合 + 当前类别（导航游标）。

状态机：
- 状态 = 已注册的类别名；初始状态为首页（HOME_CATEGORY）；
- 唯一的转移函数是 get_text：选中首页中的选择器 → 切换到对应类别并返回类别名；
  否则在当前类别中查找朗读文本，游标不变；
- 不变量：current_category 永远是已注册的类别名。

首页类别的条目是菜单（image key → 类别名），普通类别的条目是叶子（image key → 朗读文本）。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..utils.kv import KeyValueStore, OrderedStore, StoreFactory
from .category import AacCategory
from .errors import MappingStateError


logger = logging.getLogger(__name__)

HOME_CATEGORY = ""


class AacMappings:
    def __init__(self, *, store_factory: StoreFactory = OrderedStore) -> None:
        self._store_factory = store_factory
        self._categories: KeyValueStore = store_factory()
        self._categories.set(HOME_CATEGORY, AacCategory(HOME_CATEGORY, store_factory()))
        self._current_category = HOME_CATEGORY

    # ---- 只读访问 ----

    @property
    def home(self) -> AacCategory:
        return self._categories.get(HOME_CATEGORY)

    def category(self, name: str) -> AacCategory | None:
        if not self._categories.has_key(name):
            return None
        return self._categories.get(name)

    def category_names(self) -> tuple[str, ...]:
        return self._categories.keys()

    def unreachable_categories(self) -> tuple[str, ...]:
        """没有任何首页选择器指向的类别（例如选择器被重新声明到别的类别名后遗留的旧类别）。"""

        targets = {text for _, text in self.home.items()}
        return tuple(n for n in self._categories.keys() if n != HOME_CATEGORY and n not in targets)

    def _current(self) -> AacCategory:
        if not self._categories.has_key(self._current_category):
            raise MappingStateError(f"当前类别未注册：{self._current_category!r}")
        return self._categories.get(self._current_category)

    # ---- 导航 ----

    def get_image_locs(self) -> tuple[str, ...]:
        """当前类别中所有图片（插入顺序）。"""

        return self._current().get_images()

    def get_text(self, image_loc: str) -> str:
        """选中一张图片。

        - 若是首页选择器：切换到对应类别，并返回该类别名（调用方据此判断“发生了导航”）；
        - 否则返回当前类别中的朗读文本，游标不变；
        - 都找不到时抛 ImageNotFoundError。
        """

        home = self.home
        if home.has_image(image_loc):
            target = home.get_text(image_loc)
            if not self._categories.has_key(target):
                raise MappingStateError(f"选择器 {image_loc!r} 指向未注册的类别：{target!r}")
            self._current_category = target
            return target
        return self._current().get_text(image_loc)

    def find_text(self, image_loc: str) -> str | None:
        """get_text 的可选返回版本：找不到时返回 None（不导航）。"""

        if not self.is_category(image_loc) and not self._current().has_image(image_loc):
            return None
        return self.get_text(image_loc)

    def reset(self) -> None:
        self._current_category = HOME_CATEGORY

    def get_current_category(self) -> str:
        return self._current_category

    def is_home(self) -> bool:
        return self._current_category == HOME_CATEGORY

    def is_category(self, image_loc: str) -> bool:
        return self.home.has_image(image_loc)

    # ---- 修改 ----

    def add(self, image_loc: str, text: str) -> bool:
        """把映射加入当前类别（处于首页时，text 被视为类别名）。

        游标无法解析时记录错误并返回 False，不抛异常。
        """

        try:
            current = self._current()
        except MappingStateError:
            logger.error("无法添加 %s: %s（当前类别 %r 未注册）", image_loc, text, self._current_category)
            return False

        if current.name == HOME_CATEGORY:
            if text == HOME_CATEGORY:
                logger.error("无法添加 %s：首页选择器不能指向首页自身", image_loc)
                return False
            # 首页条目必须指向已注册的类别，否则选中它会破坏游标不变量
            self._ensure_category(text)
        current.add_item(image_loc, text)
        return True

    def declare_category(self, image_loc: str, name: str) -> AacCategory:
        """首页登记 image_loc → name，并新建（或清空重建）名为 name 的类别。

        重复声明同名类别会丢弃该类别此前的所有条目。
        """

        if name == HOME_CATEGORY:
            raise ValueError("类别名不能与首页保留名相同")
        self.home.add_item(image_loc, name)
        category = AacCategory(name, self._store_factory())
        self._categories.set(name, category)
        return category

    def _ensure_category(self, name: str) -> AacCategory:
        if self._categories.has_key(name):
            return self._categories.get(name)
        category = AacCategory(name, self._store_factory())
        self._categories.set(name, category)
        return category

    # ---- 持久化 ----

    def write_to_file(self, path: Path | str) -> None:
        from ..infra.workspace import save_mappings

        save_mappings(self, Path(path))

    def to_dict(self) -> dict[str, Any]:
        return {
            "home": self.home.to_dict(),
            "categories": {
                name: self._categories.get(name).to_dict() for name in self._categories.keys() if name != HOME_CATEGORY
            },
        }

    def __repr__(self) -> str:
        return f"AacMappings(categories={len(self._categories) - 1}, current={self._current_category!r})"
