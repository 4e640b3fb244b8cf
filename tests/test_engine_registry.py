import pytest

from treetrace import engines
from treetrace.engines import (
    AVL,
    BST,
    RED_BLACK,
    InsertionEngine,
    available_engines,
    bst,
    get_engine,
    register_engine,
    resolve_engine,
)
from treetrace.errors import UnknownEngineError
from treetrace.traversal import inorder


@pytest.fixture
def isolated_registry(monkeypatch):
    monkeypatch.setattr(engines, "_engines", dict(engines._engines))


def test_builtin_engines_are_registered():
    assert {"avl", "red_black", "rbtree", "bst"} <= set(available_engines())
    assert get_engine("avl") is AVL
    assert get_engine("rbtree") is RED_BLACK
    assert get_engine("red_black") is RED_BLACK
    assert get_engine("bst") is BST


def test_engine_metadata_fields():
    assert AVL.fields == ("height",)
    assert RED_BLACK.fields == ("color",)
    assert BST.fields == ()
    assert BST.check is None


def test_unknown_engine_raises_key_error():
    with pytest.raises(UnknownEngineError) as exc:
        get_engine("splay")
    assert isinstance(exc.value, KeyError)
    assert "avl" in exc.value.details["available"]
    assert "splay" in str(exc.value)


def test_resolve_accepts_names_and_objects():
    assert resolve_engine("avl") is AVL
    assert resolve_engine(BST) is BST


def test_register_custom_engine(isolated_registry):
    custom = InsertionEngine(name="bst2", insert=bst.insert)
    register_engine(custom, "plain")
    assert get_engine("plain") is custom
    with pytest.raises(ValueError, match="already registered"):
        register_engine(custom)
    register_engine(custom, replace=True)


def test_register_rejects_bad_engines(isolated_registry):
    with pytest.raises(TypeError):
        register_engine("avl")  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="callable"):
        register_engine(InsertionEngine(name="x", insert=None))  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="unsupported snapshot fields"):
        register_engine(InsertionEngine(name="y", insert=bst.insert, fields=("x",)))


def test_plain_bst_does_not_rebalance():
    root = None
    for k in [1, 2, 3, 4]:
        root = bst.insert(root, k)
    assert root.value == 1
    assert root.right.right.right.value == 4
    assert root.left is None


def test_plain_bst_routes_duplicates_right():
    root = None
    for k in [5, 3, 5, 5, 4]:
        root = bst.insert(root, k)
    assert root.right.value == 5
    assert root.right.right.value == 5
    assert inorder(root) == [3, 4, 5, 5, 5]


def test_failed_registration_leaves_registry_untouched(isolated_registry):
    before = available_engines()
    with pytest.raises(ValueError, match="'avl' is already registered"):
        register_engine(InsertionEngine(name="fresh", insert=bst.insert), "avl")
    assert available_engines() == before
    with pytest.raises(UnknownEngineError):
        get_engine("fresh")
