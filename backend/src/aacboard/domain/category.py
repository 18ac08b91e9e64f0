"""
单个类别：image key → 朗读文本（首页类别中则是 image key → 类别名）。

约束：
- 同一类别内 image key 唯一，后写覆盖先写（静默、完整覆盖）；
- 没有删除操作，类别在程序生命周期内只增不减；
- get_images() 返回插入顺序的快照，决定前端渲染顺序。
"""

from __future__ import annotations

from typing import Iterator

from ..utils.kv import KeyValueStore, OrderedStore
from .errors import ImageNotFoundError


class AacCategory:
    def __init__(self, name: str, store: KeyValueStore | None = None) -> None:
        self._name = name
        self._words: KeyValueStore = store if store is not None else OrderedStore()

    @property
    def name(self) -> str:
        return self._name

    def add_item(self, image_loc: str, text: str) -> None:
        self._words.set(image_loc, text)

    def get_text(self, image_loc: str) -> str:
        """返回 image_loc 对应的文本；不存在时抛 ImageNotFoundError。"""

        if not self._words.has_key(image_loc):
            raise ImageNotFoundError(image_loc, self._name)
        return self._words.get(image_loc)

    def find_text(self, image_loc: str) -> str | None:
        if not self._words.has_key(image_loc):
            return None
        return self._words.get(image_loc)

    def has_image(self, image_loc: str) -> bool:
        return self._words.has_key(image_loc)

    def get_images(self) -> tuple[str, ...]:
        return self._words.keys()

    def items(self) -> Iterator[tuple[str, str]]:
        for k in self._words.keys():
            yield k, self._words.get(k)

    def to_dict(self) -> dict[str, str]:
        return dict(self.items())

    def __len__(self) -> int:
        return len(self._words)

    def __repr__(self) -> str:
        return f"AacCategory(name={self._name!r}, size={len(self)})"
