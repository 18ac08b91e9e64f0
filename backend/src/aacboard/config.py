"""
沟通板运行配置（YAML）。

文件形如：

    mappings_file: ../docs/data/examples/aac_mappings_demo.txt
    save_file: null          # 省略时与 mappings_file 相同
    log_level: info
    server:
      host: 127.0.0.1
      port: 7140

约束：
- 相对路径相对配置文件所在目录解析；
- 未识别字段、类型错误必须抛出明确异常，不做静默降级。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .utils.paths import resolve_relative


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7140
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

_TOP_KEYS = {"mappings_file", "save_file", "log_level", "server"}
_SERVER_KEYS = {"host", "port"}


@dataclass(frozen=True)
class ServerSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> "ServerSettings":
        if d is None:
            return cls()
        if not isinstance(d, dict):
            raise ValueError("server 必须是 mapping")
        unknown = set(d) - _SERVER_KEYS
        if unknown:
            raise ValueError(f"server 含未识别字段：{sorted(unknown)!r}")
        host = d.get("host", DEFAULT_HOST)
        port = d.get("port", DEFAULT_PORT)
        if not isinstance(host, str) or not host:
            raise ValueError(f"server.host 非法：{host!r}")
        if isinstance(port, bool) or not isinstance(port, int) or not (0 < port < 65536):
            raise ValueError(f"server.port 非法：{port!r}")
        return cls(host=host, port=port)


@dataclass(frozen=True)
class BoardSettings:
    mappings_file: Path
    save_file: Path
    log_level: str = "info"
    server: ServerSettings = field(default_factory=ServerSettings)

    @classmethod
    def from_dict(cls, d: dict[str, Any], *, base_dir: Path) -> "BoardSettings":
        if not isinstance(d, dict):
            raise ValueError("配置文件顶层必须是 mapping")
        unknown = set(d) - _TOP_KEYS
        if unknown:
            raise ValueError(f"配置含未识别字段：{sorted(unknown)!r}")

        mappings_file = d.get("mappings_file")
        if not isinstance(mappings_file, str) or not mappings_file:
            raise ValueError("mappings_file 必填且必须是字符串")
        save_file = d.get("save_file") or mappings_file
        if not isinstance(save_file, str):
            raise ValueError(f"save_file 非法：{save_file!r}")

        log_level = str(d.get("log_level") or "info").lower()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"log_level 非法：{log_level!r}（可选 {', '.join(LOG_LEVELS)}）")

        return cls(
            mappings_file=resolve_relative(mappings_file, base_dir),
            save_file=resolve_relative(save_file, base_dir),
            log_level=log_level,
            server=ServerSettings.from_dict(d.get("server")),
        )

    @classmethod
    def load(cls, path: Path) -> "BoardSettings":
        path = Path(path).resolve()
        d = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.from_dict(d, base_dir=path.parent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mappings_file": str(self.mappings_file),
            "save_file": str(self.save_file),
            "log_level": self.log_level,
            "server": {"host": self.server.host, "port": self.server.port},
        }
