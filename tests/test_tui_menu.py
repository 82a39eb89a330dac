"""Unit tests for the menu tree."""
from __future__ import annotations

import pytest

from elmos_console.errors import InvalidMenuNode
from elmos_console.tui.actions import DEFAULT_ARGV, ActionID, ActionTable
from elmos_console.tui.menu import MenuNode, MenuTree, category, default_menu, leaf


@pytest.fixture
def table():
    return ActionTable()


def test_default_menu_validates(table):
    """The shipped catalog passes validation against the default table."""
    default_menu().validate(table)


def test_default_menu_roots():
    """Test the root categories and their order."""
    tree = default_menu()
    labels = [node.label for node in tree.roots]
    assert labels == [
        "Workspace", "Kernel", "Modules", "Apps", "QEMU",
        "RootFS", "Toolchains", "Config", "Doctor",
    ]
    assert tree.title == "ELMOS"


def test_default_menu_covers_every_action():
    """Test every ActionID appears in the default menu."""
    tree = default_menu()
    assert {node.action for node in tree.leaves()} == set(ActionID)


def test_walk_is_depth_first():
    """Test walk visits nodes depth first."""
    tree = MenuTree([
        category("A", "", leaf("A1", "", ActionID.INIT_MOUNT, "elmos init mount")),
        leaf("B", "", ActionID.DOCTOR_CHECK, "elmos doctor"),
    ])
    assert [node.label for node in tree.walk()] == ["A", "A1", "B"]


def test_lookup_finds_leaf():
    """Test lookup returns the leaf carrying an action."""
    tree = default_menu()
    node = tree.lookup(ActionID.MODULE_BUILD_ONE)
    assert node.label == "Build One"
    assert node.needs_input
    assert node.input_prompt == "Module name:"
    assert node.input_placeholder == "my_module"

    assert tree.lookup("qemu:run").interactive


def test_lookup_missing_raises():
    """Test lookup raises KeyError for an absent action."""
    tree = MenuTree([leaf("Doctor", "", ActionID.DOCTOR_CHECK, "elmos doctor")])
    with pytest.raises(KeyError):
        tree.lookup(ActionID.MODULE_LIST)


def test_leaf_helper_sets_input_flags():
    """Test leaf() marks prompted leaves as needing input."""
    node = leaf("Set Jobs", "", ActionID.CONFIG_JOBS, "elmos config set jobs <n>", prompt="Jobs:")
    assert node.needs_input
    assert not node.interactive
    assert not node.is_category


def test_render_command_substitutes_placeholder():
    """Test the value replaces an angle-bracket placeholder."""
    node = leaf("Build One", "", ActionID.MODULE_BUILD_ONE, "elmos module build <name>", prompt="Name:")
    assert node.render_command("hello") == "elmos module build hello"
    assert node.render_command() == "elmos module build <name>"


def test_render_command_square_placeholder():
    """Test the value replaces a square-bracket placeholder."""
    node = MenuNode(label="x", command="elmos rootfs create -s [size]")
    assert node.render_command("10G") == "elmos rootfs create -s 10G"


def test_render_command_without_placeholder():
    """Test templates without a placeholder are unchanged."""
    node = MenuNode(label="x", command="elmos doctor")
    assert node.render_command("ignored") == "elmos doctor"


# ── validation failures ─────────────────────────────────────────────

def test_validate_empty_tree(table):
    """Test an empty tree is rejected."""
    with pytest.raises(InvalidMenuNode, match="no entries"):
        MenuTree([]).validate(table)


def test_validate_leaf_without_action(table):
    """Test a leaf without an action is rejected."""
    tree = MenuTree([MenuNode(label="Orphan")])
    with pytest.raises(InvalidMenuNode, match="Orphan"):
        tree.validate(table)


def test_validate_category_with_action(table):
    """Test a category carrying an action is rejected."""
    bad = MenuNode(
        label="Kernel",
        action=ActionID.KERNEL_BUILD,
        children=(leaf("Build", "", ActionID.KERNEL_BUILD, "elmos build"),),
    )
    with pytest.raises(InvalidMenuNode, match="category 'Kernel'"):
        MenuTree([bad]).validate(table)


def test_validate_unknown_action_string(table):
    """Test a raw string action is rejected."""
    tree = MenuTree([MenuNode(label="Raw", action="doctor:check", command="elmos doctor")])
    with pytest.raises(InvalidMenuNode, match="unknown action"):
        tree.validate(table)


def test_validate_input_and_interactive(table):
    """Test a leaf needing input and being interactive is rejected."""
    node = MenuNode(
        label="Both",
        action=ActionID.QEMU_RUN,
        needs_input=True,
        interactive=True,
    )
    with pytest.raises(InvalidMenuNode, match="cannot both"):
        MenuTree([node]).validate(table)


def test_validate_action_missing_from_table():
    """Test an action absent from the table is rejected."""
    builders = dict(DEFAULT_ARGV)
    del builders[ActionID.DOCTOR_CHECK]
    with pytest.raises(InvalidMenuNode, match="doctor:check"):
        default_menu().validate(ActionTable(builders))


def test_validate_duplicate_action(table):
    """Test the same action on two leaves is rejected."""
    tree = MenuTree([
        leaf("Doctor", "", ActionID.DOCTOR_CHECK, "elmos doctor"),
        leaf("Doctor again", "", ActionID.DOCTOR_CHECK, "elmos doctor"),
    ])
    with pytest.raises(InvalidMenuNode, match="more than once"):
        tree.validate(table)


def test_validate_category_input_and_interactive(table):
    """Test a category setting both input and interactive flags is rejected."""
    bad = MenuNode(
        label="Cat",
        needs_input=True,
        interactive=True,
        children=(leaf("Doctor", "", ActionID.DOCTOR_CHECK, "elmos doctor"),),
    )
    with pytest.raises(InvalidMenuNode, match="'Cat' cannot both"):
        MenuTree([bad]).validate(table)


def test_require_action():
    """Test require_action returns the leaf action and rejects categories."""
    tree = default_menu()
    assert tree.lookup(ActionID.DOCTOR_CHECK).require_action() is ActionID.DOCTOR_CHECK
    with pytest.raises(InvalidMenuNode, match="Workspace"):
        tree.roots[0].require_action()


def test_bare_command_drops_placeholder():
    """Test bare_command removes the value placeholder."""
    node = default_menu().lookup(ActionID.KERNEL_SWITCH)
    assert node.bare_command() == "elmos kernel switch"
    assert node.list_task == "Listing refs..."
