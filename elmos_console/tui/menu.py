"""Menu tree: the immutable catalog of categories and actions."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Sequence

from ..errors import InvalidMenuNode
from .actions import ActionID, ActionTable

# `<name>` or `[name]` inside a command template marks where the value goes.
_PLACEHOLDER = re.compile(r"<[^<>]+>|\[[^\[\]]+\]")


@dataclass(frozen=True)
class MenuNode:
    """A single entry in the menu tree.

    A node is either a category (``children`` non-empty, no ``action``) or an
    actionable leaf (``action`` set, no ``children``). ``MenuTree.validate``
    enforces this.
    """

    label: str
    description: str = ""
    action: ActionID | None = None
    command: str = ""
    needs_input: bool = False
    interactive: bool = False
    input_prompt: str = ""
    input_placeholder: str = ""
    list_task: str = ""
    children: tuple[MenuNode, ...] = ()

    @property
    def is_category(self) -> bool:
        return bool(self.children)

    def require_action(self) -> ActionID:
        """Return the leaf's action.

        Raises:
            InvalidMenuNode: the node is a category or carries no action.
        """
        if self.action is None:
            raise InvalidMenuNode(f"'{self.label}' has no action to run")
        return self.action

    def bare_command(self) -> str:
        """Display command with the value placeholder dropped."""
        return " ".join(_PLACEHOLDER.sub("", self.command).split())

    def render_command(self, value: str = "") -> str:
        """Return the display command with ``value`` put in the placeholder.

        Templates without a placeholder are returned unchanged.
        """
        if not value:
            return self.command
        return _PLACEHOLDER.sub(lambda _m: value, self.command, count=1)


def category(label: str, description: str, *children: MenuNode) -> MenuNode:
    return MenuNode(label=label, description=description, children=tuple(children))


def leaf(
    label: str,
    description: str,
    action: ActionID,
    command: str,
    *,
    interactive: bool = False,
    prompt: str | None = None,
    placeholder: str = "",
    list_task: str = "",
) -> MenuNode:
    """Build an actionable leaf; passing ``prompt`` marks it as needing input.

    ``list_task`` is the task title used when the captured value asks the
    executor for a listing instead of being passed as an argument.
    """
    return MenuNode(
        label=label,
        description=description,
        action=action,
        command=command,
        needs_input=prompt is not None,
        interactive=interactive,
        input_prompt=prompt or "",
        input_placeholder=placeholder,
        list_task=list_task,
    )


class MenuTree:
    """Immutable hierarchy of :class:`MenuNode` owned by one session."""

    def __init__(self, roots: Sequence[MenuNode], title: str = "ELMOS"):
        self.roots: tuple[MenuNode, ...] = tuple(roots)
        self.title = title

    def walk(self) -> Iterator[MenuNode]:
        """Yield every node, depth first, in display order."""
        pending = list(reversed(self.roots))
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(node.children))

    def leaves(self) -> Iterator[MenuNode]:
        return (node for node in self.walk() if not node.is_category)

    def validate(self, table: ActionTable) -> None:
        """Check every node and the action mapping.

        Raises:
            InvalidMenuNode: on the first violation found.
        """
        if not self.roots:
            raise InvalidMenuNode("menu tree has no entries")

        seen: set[ActionID] = set()
        for node in self.walk():
            if node.needs_input and node.interactive:
                raise InvalidMenuNode(
                    f"'{node.label}' cannot both need input and be interactive"
                )
            if node.children:
                if node.action is not None:
                    raise InvalidMenuNode(
                        f"category '{node.label}' must not carry an action ({node.action})"
                    )
                continue

            if node.action is None:
                raise InvalidMenuNode(f"leaf '{node.label}' has no action and no children")
            if not isinstance(node.action, ActionID):
                raise InvalidMenuNode(f"leaf '{node.label}' has unknown action {node.action!r}")
            if node.action not in table:
                raise InvalidMenuNode(
                    f"action '{node.action}' of '{node.label}' has no argument vector"
                )
            if node.action in seen:
                raise InvalidMenuNode(f"action '{node.action}' appears more than once")
            seen.add(node.action)

    def lookup(self, action: ActionID | str) -> MenuNode:
        """Return the leaf carrying ``action``.

        Raises:
            KeyError: no leaf carries that action.
        """
        for node in self.leaves():
            if node.action == action:
                return node
        raise KeyError(str(action))


# ═══════════════════════════════════════════════════════════════════════════════
# DEFAULT CATALOG
# ═══════════════════════════════════════════════════════════════════════════════

def default_menu(title: str = "ELMOS") -> MenuTree:
    """Build the elmos menu catalog."""
    A = ActionID
    return MenuTree(
        [
            category(
                "Workspace", "Initialize and manage workspace",
                leaf("Initialize All", "Create image + mount + setup", A.INIT_WORKSPACE, "elmos init"),
                leaf("Mount Volume", "Attach the disk image", A.INIT_MOUNT, "elmos init mount"),
                leaf("Unmount Volume", "Detach the disk image", A.INIT_UNMOUNT, "elmos init unmount"),
                leaf("Clone Kernel", "Download Linux source", A.INIT_CLONE, "elmos init clone"),
            ),
            category(
                "Kernel", "Configure and build Linux kernel",
                leaf("Default Config", "Standard defconfig", A.KERNEL_DEFCONFIG, "elmos kernel config"),
                leaf("Tiny Config", "Minimal kernel", A.KERNEL_TINYCONFIG, "elmos kernel config tinyconfig"),
                leaf("KVM Guest", "Optimized for VMs", A.KERNEL_KVMCONFIG,
                     "elmos kernel config kvm_guest.config"),
                leaf("Menu Config", "Interactive ncurses", A.KERNEL_MENUCONFIG,
                     "elmos kernel config menuconfig", interactive=True),
                leaf("Switch", "Checkout ref", A.KERNEL_SWITCH, "elmos kernel switch <ref>",
                     prompt="Branch/Tag (? for list):", placeholder="v6.7",
                     list_task="Listing refs..."),
                leaf("Build", "Compile the kernel", A.KERNEL_BUILD, "elmos build"),
                leaf("Clean", "Remove build artifacts", A.KERNEL_CLEAN, "elmos kernel clean"),
            ),
            category(
                "Modules", "Manage kernel modules",
                leaf("List", "Show available modules", A.MODULE_LIST, "elmos module list"),
                leaf("Build All", "Compile all modules", A.MODULE_BUILD, "elmos module build"),
                leaf("Build One", "Compile specific module", A.MODULE_BUILD_ONE,
                     "elmos module build <name>", prompt="Module name:", placeholder="my_module"),
                leaf("Create New", "Generate module template", A.MODULE_NEW,
                     "elmos module new <name>", prompt="New module name:", placeholder="hello_world"),
                leaf("Clean", "Remove module binaries", A.MODULE_CLEAN, "elmos module clean"),
            ),
            category(
                "Apps", "Manage userspace applications",
                leaf("List", "Show available apps", A.APP_LIST, "elmos app list"),
                leaf("Build All", "Compile all apps", A.APP_BUILD, "elmos app build"),
                leaf("Build One", "Compile specific app", A.APP_BUILD_ONE,
                     "elmos app build <name>", prompt="App name:", placeholder="my_app"),
                leaf("Create New", "Generate app template", A.APP_NEW,
                     "elmos app new <name>", prompt="New app name:", placeholder="hello_app"),
                leaf("Clean", "Remove app binaries", A.APP_CLEAN, "elmos app clean"),
            ),
            category(
                "QEMU", "Run kernel in emulator",
                leaf("Run (Console)", "Boot in terminal", A.QEMU_RUN, "elmos qemu run", interactive=True),
                leaf("Run (GUI)", "Boot with display", A.QEMU_GRAPHICAL, "elmos qemu run -g",
                     interactive=True),
                leaf("Debug Mode", "Start GDB server", A.QEMU_DEBUG, "elmos qemu debug", interactive=True),
                leaf("Connect GDB", "Attach debugger", A.QEMU_GDB, "elmos qemu gdb", interactive=True),
            ),
            category(
                "RootFS", "Create root filesystem",
                leaf("Create (5G)", "Default size rootfs", A.ROOTFS_CREATE, "elmos rootfs create"),
                leaf("Create Custom", "Specify size (e.g. 10G)", A.ROOTFS_CREATE_CUSTOM,
                     "elmos rootfs create -s <size>", prompt="Size (e.g. 10G):", placeholder="10G"),
            ),
            category(
                "Toolchains", "Manage cross-compiler toolchains",
                leaf("Status", "Show installed toolchains", A.TOOLCHAIN_STATUS, "elmos toolchains status"),
                leaf("Install", "Install crosstool-ng", A.TOOLCHAIN_INSTALL, "elmos toolchains install"),
                leaf("List", "List available targets", A.TOOLCHAIN_LIST, "elmos toolchains list"),
                leaf("Select", "Select toolchain target", A.TOOLCHAIN_SELECT, "elmos toolchains <target>",
                     prompt="Target (e.g. riscv64-unknown-linux-gnu):",
                     placeholder="riscv64-unknown-linux-gnu"),
                leaf("Build", "Build selected toolchain", A.TOOLCHAIN_BUILD, "elmos toolchains build"),
                leaf("Env", "Show env variables", A.TOOLCHAIN_ENV, "elmos toolchains env"),
                leaf("Menuconfig", "Configure toolchain", A.TOOLCHAIN_MENUCONFIG,
                     "elmos toolchains menuconfig", interactive=True),
                leaf("Clean", "Clean toolchain build", A.TOOLCHAIN_CLEAN, "elmos toolchains clean"),
            ),
            category(
                "Config", "Manage settings",
                leaf("Show", "Display current settings", A.CONFIG_SHOW, "elmos config show"),
                leaf("Set Architecture", "arm64, arm, riscv", A.CONFIG_ARCH, "elmos config set arch <arch>",
                     prompt="Architecture (arm64/arm/riscv):", placeholder="arm64"),
                leaf("Set Build Jobs", "Parallel compilation", A.CONFIG_JOBS, "elmos config set jobs <n>",
                     prompt="Number of jobs:", placeholder="8"),
                leaf("Set QEMU Memory", "Memory allocation", A.CONFIG_MEMORY,
                     "elmos config set memory <size>", prompt="Memory (e.g. 2G):", placeholder="2G"),
            ),
            leaf("Doctor", "Check environment", A.DOCTOR_CHECK, "elmos doctor"),
        ],
        title=title,
    )
