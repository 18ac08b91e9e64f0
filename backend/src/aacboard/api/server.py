"""
AAC 沟通板后端 API（FastAPI）。

约定：
- 服务端口：7140（见 config/board.yaml）
- 启动时读取 mappings_file 构造注册表；读取失败回退为空首页，并通过 /board/load-error 报告
- 保存写入 save_file（原子替换）

API 设计原则：
- 注册表只有一个持有者（BoardSession），所有读写经同一把锁串行化；
- 选中图片（/board/select）是唯一的导航入口，返回值同时说明“是否发生了导航”；
- 添加前按文件格式校验记录，无法写出的记录直接 400 拒绝（没有删除操作，接受后会话内将无法保存）；
- 严格校验，宁可失败，不做静默降级。
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import BoardSettings
from ..domain.errors import ImageNotFoundError, MappingParseError, MappingStateError, MappingWriteError
from ..domain.mapping_text import check_add
from ..domain.mappings import AacMappings
from ..infra.workspace import load_mappings, save_mappings
from ..utils.paths import default_config_path


logger = logging.getLogger(__name__)

CONFIG_ENV = "AACBOARD_CONFIG"


@dataclass
class BoardSession:
    mappings: AacMappings
    save_file: Path
    load_error: MappingParseError | None = None
    lock: threading.Lock = field(default_factory=threading.Lock)

    @classmethod
    def from_settings(cls, settings: BoardSettings) -> "BoardSession":
        result = load_mappings(settings.mappings_file)
        return cls(mappings=result.mappings, save_file=settings.save_file, load_error=result.error)

    def board_view(self) -> dict[str, Any]:
        return {
            "current_category": self.mappings.get_current_category(),
            "is_home": self.mappings.is_home(),
            "image_locs": list(self.mappings.get_image_locs()),
        }


class SelectRequest(BaseModel):
    image_loc: str


class AddItemRequest(BaseModel):
    image_loc: str = Field(min_length=1)
    text: str


def create_app(settings: BoardSettings | None = None, *, session: BoardSession | None = None) -> FastAPI:
    if session is None:
        if settings is None:
            raise ValueError("create_app 需要 settings 或 session")
        session = BoardSession.from_settings(settings)

    app = FastAPI(title="AAC Board Backend", version=__version__)
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/board")
    def api_get_board() -> dict[str, Any]:
        with session.lock:
            try:
                return session.board_view()
            except MappingStateError as e:
                raise HTTPException(status_code=500, detail=str(e)) from e

    @app.post("/board/select")
    def api_select(req: SelectRequest) -> dict[str, Any]:
        with session.lock:
            try:
                navigated = session.mappings.is_category(req.image_loc)
                text = session.mappings.get_text(req.image_loc)
                return {"text": text, "navigated": navigated, **session.board_view()}
            except ImageNotFoundError as e:
                raise HTTPException(status_code=404, detail=str(e)) from e
            except MappingStateError as e:
                raise HTTPException(status_code=500, detail=str(e)) from e

    @app.post("/board/reset")
    def api_reset() -> dict[str, Any]:
        with session.lock:
            session.mappings.reset()
            return session.board_view()

    @app.post("/board/items")
    def api_add_item(req: AddItemRequest) -> dict[str, Any]:
        with session.lock:
            try:
                check_add(session.mappings, req.image_loc, req.text)
            except MappingWriteError as e:
                raise HTTPException(status_code=400, detail=str(e)) from e
            if not session.mappings.add(req.image_loc, req.text):
                raise HTTPException(status_code=400, detail=f"无法添加 {req.image_loc!r}（详见服务端日志）")
            return session.board_view()

    @app.post("/board/save")
    def api_save() -> dict[str, Any]:
        path = session.save_file
        with session.lock:
            try:
                save_mappings(session.mappings, path)
            except MappingWriteError as e:
                raise HTTPException(status_code=500, detail=str(e)) from e
            return {"saved": str(path), **session.board_view()}

    @app.get("/board/mappings")
    def api_get_mappings() -> dict[str, Any]:
        with session.lock:
            return session.mappings.to_dict()

    @app.get("/board/load-error")
    def api_load_error() -> dict[str, Any]:
        err = session.load_error
        return {
            "ok": err is None,
            "detail": None if err is None else str(err),
            "line_no": None if err is None else err.line_no,
        }

    return app


def create_default_app() -> FastAPI:
    """uvicorn factory 入口：配置路径取自环境变量 AACBOARD_CONFIG，缺省为 config/board.yaml。"""

    cfg = os.environ.get(CONFIG_ENV)
    path = Path(cfg) if cfg else default_config_path()
    settings = BoardSettings.load(path)
    logger.info("使用配置 %s", path)
    return create_app(settings)
