"""
映射引擎的错误分类。

- ImageNotFoundError：查询的 image key 不在被查询的类别中
- MappingStateError：导航游标指向未注册的类别（内部一致性被破坏，属致命错误）
- MappingParseError：映射文本某行格式非法，或源文件不可读
- MappingWriteError：记录无法用文件格式表达，或写盘失败
"""

from __future__ import annotations


class ImageNotFoundError(KeyError):
    def __init__(self, image_loc: str, category: str) -> None:
        super().__init__(image_loc)
        self.image_loc = image_loc
        self.category = category

    def __str__(self) -> str:
        return f"类别 {self.category!r} 中不存在图片：{self.image_loc!r}"


class MappingStateError(RuntimeError):
    pass


class MappingParseError(ValueError):
    def __init__(self, message: str, *, line_no: int | None = None, line: str | None = None) -> None:
        if line_no is not None:
            message = f"第 {line_no} 行：{message}"
        super().__init__(message)
        self.line_no = line_no
        self.line = line


class MappingWriteError(OSError):
    pass
