"""
通用键值容器（类别与注册表的底层存储）。

约定：
- 只依赖能力集合：set / get / has_key / keys，不绑定具体实现；
- keys() 必须保持插入顺序（前端按此顺序渲染符号，顺序可观察、必须稳定）；
- 覆盖写入保持原插入位置。
"""

from __future__ import annotations

from typing import Callable, Generic, Protocol, TypeVar


K = TypeVar("K")
V = TypeVar("V")


class KeyValueStore(Protocol[K, V]):
    def set(self, key: K, value: V) -> None: ...

    def get(self, key: K) -> V: ...

    def has_key(self, key: K) -> bool: ...

    def keys(self) -> tuple[K, ...]: ...

    def __len__(self) -> int: ...


class OrderedStore(Generic[K, V]):
    """基于 dict 的默认实现（dict 自身保证插入顺序）。"""

    def __init__(self) -> None:
        self._data: dict[K, V] = {}

    def set(self, key: K, value: V) -> None:
        self._data[key] = value

    def get(self, key: K) -> V:
        # 缺失时抛 KeyError，由上层转换为领域错误
        return self._data[key]

    def has_key(self, key: K) -> bool:
        return key in self._data

    def keys(self) -> tuple[K, ...]:
        return tuple(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"OrderedStore({self._data!r})"


StoreFactory = Callable[[], KeyValueStore]
