"""
AAC 沟通板后端开发服务器启动脚本。

定位：
- 读取 config/board.yaml（或 --config 指定的文件），把配置路径通过环境变量交给 app factory；
- 命令行参数优先于配置文件中的 server.host / server.port / log_level。

用法：
  python backend/run_server.py

可选参数（透传给 uvicorn）：
  python backend/run_server.py --reload
  python backend/run_server.py --config config/board.yaml --host 0.0.0.0 --port 7140
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn


def main() -> None:
    backend_dir = Path(__file__).resolve().parent
    src_dir = backend_dir / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到后端源码目录：{src_dir}")

    # 未 pip install -e 时也能直接运行
    sys.path.insert(0, str(src_dir))

    from aacboard.api.server import CONFIG_ENV
    from aacboard.config import BoardSettings
    from aacboard.utils.paths import default_config_path

    parser = argparse.ArgumentParser(add_help=True)
    parser.add_argument("--config", default=None)
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--reload", action="store_true", default=False)
    parser.add_argument("--log-level", default=None)
    args, unknown = parser.parse_known_args(sys.argv[1:])
    if unknown:
        raise SystemExit(f"不支持的参数：{unknown!r}")

    config_path = Path(args.config).resolve() if args.config else default_config_path()
    settings = BoardSettings.load(config_path)
    log_level = (args.log_level or settings.log_level).lower()

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    os.environ[CONFIG_ENV] = str(config_path)

    uvicorn.run(
        "aacboard.api.server:create_default_app",
        factory=True,
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
        reload=args.reload,
        reload_dirs=[str(src_dir)] if args.reload else None,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
