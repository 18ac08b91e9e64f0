"""
路径与仓库定位工具。

定位：
- 启动脚本需要定位仓库根目录，用于读取默认配置（config/board.yaml）与示例映射（docs/data/examples）。
- 相对路径一律相对配置文件所在目录解析，不依赖当前工作目录。
"""

from __future__ import annotations

from pathlib import Path


def find_repo_root(start: Path | None = None) -> Path:
    """向上搜索仓库根目录（基于目录特征）。"""

    cur = (start or Path(__file__)).resolve()
    if cur.is_file():
        cur = cur.parent

    for _ in range(20):
        if (cur / "backend").exists() and (cur / "config").exists():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent
    raise RuntimeError("无法定位仓库根目录（未找到 backend/config 两个目录）")


def default_config_path() -> Path:
    return find_repo_root() / "config" / "board.yaml"


def examples_dir() -> Path:
    return find_repo_root() / "docs" / "data" / "examples"


def resolve_relative(p: str | Path, base_dir: Path) -> Path:
    p = Path(p).expanduser()
    if p.is_absolute():
        return p
    return (base_dir / p).resolve()
