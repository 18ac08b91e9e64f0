"""
映射文件的读取与保存。

约定：
- 读取：一次性读入 UTF-8 文本（容忍 BOM）并解析；源文件不可读或格式非法时，回退为只含空首页的注册表，
  并把错误返回给调用方（同时记录 warning），不静默吞掉；
- 保存：先写同目录下的临时文件、fsync，再 os.replace 覆盖目标文件（沿用原文件的权限位）；
  写入未完成时，磁盘上原文件保持不变；
- 无论成功与否，保存后导航游标回到首页。
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ..domain.errors import MappingParseError, MappingWriteError
from ..domain.mapping_text import dump_mappings_text, parse_mappings_text
from ..domain.mappings import AacMappings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    mappings: AacMappings
    error: MappingParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise MappingParseError(f"无法读取映射文件 {path}：{e}") from e


def load_mappings_strict(path: Path) -> AacMappings:
    """读取并解析映射文件；失败时抛 MappingParseError。"""

    return parse_mappings_text(_read_text(path))


def load_mappings(path: Path) -> LoadResult:
    """读取映射文件；失败时回退为空首页注册表，错误放在 LoadResult.error。"""

    try:
        mappings = load_mappings_strict(path)
    except MappingParseError as e:
        logger.warning("从 %s 构造映射失败，回退为空首页：%s", path, e)
        return LoadResult(mappings=AacMappings(), error=e)
    logger.info("已从 %s 读取 %d 个类别", path, len(mappings.category_names()) - 1)
    return LoadResult(mappings=mappings)


def save_mappings(mappings: AacMappings, path: Path) -> None:
    """原子写出映射文件；失败时抛 MappingWriteError，原文件不变。"""

    try:
        text = dump_mappings_text(mappings)
    finally:
        mappings.reset()

    path = Path(path)
    directory = path.parent
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    except OSError as e:
        raise MappingWriteError(f"无法在 {directory} 创建临时文件：{e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise MappingWriteError(f"写入映射文件 {path} 失败：{e}") from e

    logger.info("已保存映射到 %s", path)
