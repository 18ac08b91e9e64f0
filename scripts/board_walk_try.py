"""
沟通板开发期尝试脚本：模拟前端点选流程。

目标：
- 读取示例映射文件（或命令行指定的文件）
- 从首页依次点进每个类别，打印每张图片对应的朗读文本
- 把注册表重新写出到 temp/out_board_walk/，便于与原文件对比

运行：
  python scripts/board_walk_try.py [mappings.txt]
"""

from __future__ import annotations

import json
from pathlib import Path
import sys


def _ensure_backend_src_on_path(repo_root: Path) -> None:
    src_dir = repo_root / "backend" / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 backend/src：{src_dir}")
    sys.path.insert(0, str(src_dir))


def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    _ensure_backend_src_on_path(repo_root)

    from aacboard.infra.workspace import load_mappings, save_mappings
    from aacboard.utils.paths import examples_dir

    src = Path(sys.argv[1]) if len(sys.argv) > 1 else examples_dir() / "aac_mappings_demo.txt"
    result = load_mappings(src)
    if not result.ok:
        raise SystemExit(f"读取失败：{result.error}")
    m = result.mappings

    out = []
    for selector in m.get_image_locs():
        m.reset()
        name = m.get_text(selector)
        spoken = {loc: m.get_text(loc) for loc in m.get_image_locs() if not m.is_category(loc)}
        out.append({"selector": selector, "category": name, "items": spoken})
    m.reset()

    print(json.dumps(out, ensure_ascii=False, indent=2))

    out_dir = repo_root / "temp" / "out_board_walk"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / src.name
    save_mappings(m, out_path)
    print(f"[OK] categories={len(out)} written={out_path}")


if __name__ == "__main__":
    main()
