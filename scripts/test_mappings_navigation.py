"""
注册表（AacMappings）导航状态机回归测试。

覆盖：
- 导航：选中首页选择器 → 返回类别名，当前类别随之切换，get_image_locs 返回该类别的 key
- 叶子查找：当前类别内返回朗读文本，游标不变
- reset：任意导航深度后都回到首页
- add：在首页时 text 视为类别名（自动建类别）；在普通类别中是叶子
- declare_category：重复声明清空旧条目（reset-on-redeclare）
- 游标指向未注册类别属于内部一致性错误

用法：
  python scripts/test_mappings_navigation.py
"""

from __future__ import annotations

from pathlib import Path
import sys


REPO_ROOT = Path(__file__).resolve().parents[1]


def _ensure_backend_src_on_path(repo_root: Path) -> None:
    src_dir = repo_root / "backend" / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 backend/src：{src_dir}")
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


_ensure_backend_src_on_path(REPO_ROOT)

from aacboard.domain.errors import ImageNotFoundError, MappingStateError  # noqa: E402
from aacboard.domain.mappings import HOME_CATEGORY, AacMappings  # noqa: E402


def _demo() -> AacMappings:
    m = AacMappings()
    animals = m.declare_category("img1.png", "Animals")
    animals.add_item("cat.png", "A cat")
    animals.add_item("dog.png", "A dog")
    food = m.declare_category("img2.png", "Food")
    food.add_item("apple.png", "An apple")
    return m


def test_initial_state_is_home() -> None:
    m = AacMappings()
    assert m.get_current_category() == HOME_CATEGORY
    assert m.is_home()
    assert m.get_image_locs() == ()
    assert m.category_names() == (HOME_CATEGORY,)


def test_selecting_a_selector_navigates() -> None:
    m = _demo()
    assert m.get_image_locs() == ("img1.png", "img2.png")
    assert m.is_category("img1.png")
    assert m.get_text("img1.png") == "Animals"
    assert m.get_current_category() == "Animals"
    assert m.get_image_locs() == ("cat.png", "dog.png")


def test_leaf_lookup_keeps_cursor() -> None:
    m = _demo()
    m.get_text("img1.png")
    assert m.get_text("cat.png") == "A cat"
    assert m.get_current_category() == "Animals"
    assert not m.is_category("cat.png")


def test_selector_wins_from_any_category() -> None:
    m = _demo()
    m.get_text("img1.png")
    assert m.get_text("img2.png") == "Food"
    assert m.get_current_category() == "Food"
    assert m.get_image_locs() == ("apple.png",)


def test_unknown_key_raises_not_found() -> None:
    m = _demo()
    try:
        m.get_text("unknown.png")
    except ImageNotFoundError as e:
        assert e.image_loc == "unknown.png"
    else:
        raise AssertionError("未知 key 必须抛 ImageNotFoundError")

    # 叶子只能在当前类别中找到
    m.get_text("img2.png")
    try:
        m.get_text("cat.png")
    except ImageNotFoundError as e:
        assert e.category == "Food"
    else:
        raise AssertionError("其他类别的叶子不可见")
    assert m.get_current_category() == "Food"


def test_find_text_is_optional_and_does_not_navigate_on_miss() -> None:
    m = _demo()
    m.get_text("img1.png")
    assert m.find_text("missing.png") is None
    assert m.get_current_category() == "Animals"
    assert m.find_text("dog.png") == "A dog"
    assert m.find_text("img2.png") == "Food"
    assert m.get_current_category() == "Food"


def test_reset_always_returns_home() -> None:
    m = _demo()
    m.reset()
    assert m.get_current_category() == HOME_CATEGORY
    for key in ["img1.png", "cat.png", "img2.png", "apple.png", "img1.png"]:
        m.get_text(key)
    m.reset()
    assert m.get_current_category() == HOME_CATEGORY
    assert m.get_image_locs() == ("img1.png", "img2.png")


def test_add_at_home_creates_category() -> None:
    m = AacMappings()
    assert m.add("img/hanger.png", "clothing")
    assert m.category("clothing") is not None
    assert m.get_text("img/hanger.png") == "clothing"
    assert m.add("img/skirt.png", "skirt")
    assert m.get_image_locs() == ("img/skirt.png",)
    assert m.get_text("img/skirt.png") == "skirt"
    assert m.home.get_images() == ("img/hanger.png",)


def test_add_at_home_keeps_existing_category_items() -> None:
    m = _demo()
    assert m.add("img3.png", "Animals")
    m.get_text("img3.png")
    assert m.get_image_locs() == ("cat.png", "dog.png")


def test_add_rejects_selector_to_home() -> None:
    m = AacMappings()
    assert m.add("loop.png", HOME_CATEGORY) is False
    assert not m.is_category("loop.png")


def test_redeclare_resets_category() -> None:
    m = _demo()
    m.declare_category("img9.png", "Animals")
    assert m.category("Animals").get_images() == ()
    assert m.home.get_text("img1.png") == "Animals"
    assert m.home.get_text("img9.png") == "Animals"


def test_declare_rejects_home_name() -> None:
    m = AacMappings()
    try:
        m.declare_category("x.png", HOME_CATEGORY)
    except ValueError:
        pass
    else:
        raise AssertionError("不能声明与首页同名的类别")


def test_unregistered_cursor_is_internal_error() -> None:
    m = _demo()
    m._current_category = "ghost"
    try:
        m.get_image_locs()
    except MappingStateError:
        pass
    else:
        raise AssertionError("游标指向未注册类别必须抛 MappingStateError")
    assert m.add("x.png", "y") is False
    m.reset()
    assert m.get_image_locs() == ("img1.png", "img2.png")


def test_to_dict_snapshot() -> None:
    m = _demo()
    assert m.to_dict() == {
        "home": {"img1.png": "Animals", "img2.png": "Food"},
        "categories": {
            "Animals": {"cat.png": "A cat", "dog.png": "A dog"},
            "Food": {"apple.png": "An apple"},
        },
    }


def main() -> None:
    test_initial_state_is_home()
    test_selecting_a_selector_navigates()
    test_leaf_lookup_keeps_cursor()
    test_selector_wins_from_any_category()
    test_unknown_key_raises_not_found()
    test_find_text_is_optional_and_does_not_navigate_on_miss()
    test_reset_always_returns_home()
    test_add_at_home_creates_category()
    test_add_at_home_keeps_existing_category_items()
    test_add_rejects_selector_to_home()
    test_redeclare_resets_category()
    test_declare_rejects_home_name()
    test_unregistered_cursor_is_internal_error()
    test_to_dict_snapshot()
    print("[OK] mappings navigation")


if __name__ == "__main__":
    main()
