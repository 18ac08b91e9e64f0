"""
AAC 映射文件（纯文本）解析与写出。

格式（按行，换行分隔）：
- 类别声明：`<image_key> <类别名>`；类别名可含空格
- 条目：`><image_key> <朗读文本>`；以 `>` 开头，加入最近声明的类别

约定：
- 第一个空格是唯一的字段分隔符，不支持转义；
- 以 `>` 开头的类别声明 key、以 `>` 开头的字面文本无法表达（已知限制，写出时直接拒绝）；
- 解析时的“声明游标”与注册表的导航游标是两个独立变量，互不影响；
- 重复声明同名类别会清空此前写入的条目（与 AacMappings.declare_category 一致）；
- 类别只能随选择器声明写出，存在没有选择器指向的类别时拒绝写出。

写出结果必须能被解析器读回，并得到等价的注册表（类别名集合、首页选择器、各类别键值集合相同）。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .category import AacCategory
from .errors import MappingParseError, MappingWriteError
from .mappings import HOME_CATEGORY, AacMappings


ITEM_SIGIL = ">"
FIELD_SEP = " "


@dataclass(frozen=True)
class MappingLine:
    """单行解析结果。"""

    kind: Literal["category", "item"]
    image_loc: str
    value: str


def parse_mapping_line(line: str, *, line_no: int | None = None) -> MappingLine:
    n = line.find(FIELD_SEP)
    if n < 0:
        raise MappingParseError(f"缺少分隔空格：{line!r}", line_no=line_no, line=line)
    head, value = line[:n], line[n + 1 :]
    if head.startswith(ITEM_SIGIL):
        return MappingLine(kind="item", image_loc=head[len(ITEM_SIGIL) :], value=value)
    if value == HOME_CATEGORY:
        raise MappingParseError(f"类别名为空：{line!r}", line_no=line_no, line=line)
    return MappingLine(kind="category", image_loc=head, value=value)


def split_mapping_lines(text: str) -> list[str]:
    """只按 LF 分行（兼容 CRLF）；末尾换行不产生空行。

    不用 str.splitlines()：它还会在换页符、U+2028 等字符处断行，而这些字符可以合法地出现在朗读文本里。
    """

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_mappings_text(text: str, *, mappings: AacMappings | None = None) -> AacMappings:
    """把映射文本构造成 AacMappings；任一行非法则整体失败（抛 MappingParseError）。"""

    out = mappings if mappings is not None else AacMappings()
    declared: AacCategory | None = None

    for i, line in enumerate(split_mapping_lines(text), start=1):
        parsed = parse_mapping_line(line, line_no=i)
        if parsed.kind == "category":
            declared = out.declare_category(parsed.image_loc, parsed.value)
        else:
            if declared is None:
                raise MappingParseError("条目行出现在任何类别声明之前", line_no=i, line=line)
            declared.add_item(parsed.image_loc, parsed.value)

    out.reset()
    return out


def _check_representable(image_loc: str, value: str, *, kind: str) -> None:
    if FIELD_SEP in image_loc or "\n" in image_loc or "\r" in image_loc:
        raise MappingWriteError(f"image key 含空格/换行，无法写出：{image_loc!r}")
    if "\n" in value or "\r" in value:
        raise MappingWriteError(f"{kind} 文本含换行，无法写出：{image_loc!r} → {value!r}")
    if kind == "category":
        if image_loc.startswith(ITEM_SIGIL):
            raise MappingWriteError(f"类别 image key 不能以 {ITEM_SIGIL!r} 开头：{image_loc!r}")
        if value == HOME_CATEGORY:
            raise MappingWriteError(f"类别名为空：{image_loc!r}")


def format_category_line(image_loc: str, name: str) -> str:
    _check_representable(image_loc, name, kind="category")
    return f"{image_loc}{FIELD_SEP}{name}\n"


def format_item_line(image_loc: str, text: str) -> str:
    _check_representable(image_loc, text, kind="item")
    return f"{ITEM_SIGIL}{image_loc}{FIELD_SEP}{text}\n"


def check_add(mappings: AacMappings, image_loc: str, text: str) -> None:
    """在 mappings.add 之前检查：这条记录能否被写出、是否会让某个类别失去唯一的选择器。

    没有删除操作，一旦接受了无法写出的记录，本次会话之后的保存都会失败，因此必须在添加前拒绝。
    """

    if not mappings.is_home():
        _check_representable(image_loc, text, kind="item")
        return

    _check_representable(image_loc, text, kind="category")
    old = mappings.home.find_text(image_loc)
    if old is None or old == text:
        return
    others = [v for k, v in mappings.home.items() if k != image_loc]
    if old not in others:
        raise MappingWriteError(f"选择器 {image_loc!r} 改指 {text!r} 后，类别 {old!r} 将无法到达")


def dump_mappings_text(mappings: AacMappings) -> str:
    """按首页顺序写出每个类别及其条目。

    遍历借助导航游标完成（选中首页选择器即进入该类别），结束时（包括失败时）游标回到首页。
    条目文本直接从类别读取，不经过 get_text，避免条目 key 与首页选择器同名时被当成导航。
    """

    parts: list[str] = []
    mappings.reset()
    try:
        unreachable = mappings.unreachable_categories()
        if unreachable:
            # 类别只能随选择器声明写出
            raise MappingWriteError(f"存在没有选择器指向的类别，无法写出：{list(unreachable)!r}")
        for category_loc in mappings.get_image_locs():
            mappings.reset()
            name = mappings.get_text(category_loc)
            parts.append(format_category_line(category_loc, name))
            category = mappings.category(mappings.get_current_category())
            for item_loc in mappings.get_image_locs():
                parts.append(format_item_line(item_loc, category.get_text(item_loc)))
            mappings.reset()
    finally:
        mappings.reset()
    return "".join(parts)
