"""Action identifiers and the action -> argument vector table.

The table is the contract between the console and the action executable:
every leaf in the menu names an :class:`ActionID`, and every ``ActionID``
maps to a builder that turns the optional captured value into the argv
passed to the executable.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Iterator, Mapping

from ..errors import InvalidMenuNode

ArgvBuilder = Callable[[str], list[str]]


class ActionID(str, Enum):
    """Closed set of actions the console knows how to run."""

    INIT_WORKSPACE = "init:workspace"
    INIT_MOUNT = "init:mount"
    INIT_UNMOUNT = "init:unmount"
    INIT_CLONE = "init:clone"

    KERNEL_DEFCONFIG = "kernel:defconfig"
    KERNEL_TINYCONFIG = "kernel:tinyconfig"
    KERNEL_KVMCONFIG = "kernel:kvmconfig"
    KERNEL_MENUCONFIG = "kernel:menuconfig"
    KERNEL_SWITCH = "kernel:switch"
    KERNEL_BUILD = "kernel:build"
    KERNEL_CLEAN = "kernel:clean"

    MODULE_LIST = "module:list"
    MODULE_BUILD = "module:build"
    MODULE_BUILD_ONE = "module:build:one"
    MODULE_NEW = "module:new"
    MODULE_CLEAN = "module:clean"

    APP_LIST = "app:list"
    APP_BUILD = "app:build"
    APP_BUILD_ONE = "app:build:one"
    APP_NEW = "app:new"
    APP_CLEAN = "app:clean"

    QEMU_RUN = "qemu:run"
    QEMU_GRAPHICAL = "qemu:graphical"
    QEMU_DEBUG = "qemu:debug"
    QEMU_GDB = "qemu:gdb"

    ROOTFS_CREATE = "rootfs:create"
    ROOTFS_CREATE_CUSTOM = "rootfs:create:custom"

    TOOLCHAIN_STATUS = "toolchain:status"
    TOOLCHAIN_INSTALL = "toolchain:install"
    TOOLCHAIN_LIST = "toolchain:list"
    TOOLCHAIN_SELECT = "toolchain:select"
    TOOLCHAIN_BUILD = "toolchain:build"
    TOOLCHAIN_ENV = "toolchain:env"
    TOOLCHAIN_MENUCONFIG = "toolchain:menuconfig"
    TOOLCHAIN_CLEAN = "toolchain:clean"

    CONFIG_SHOW = "config:show"
    CONFIG_ARCH = "config:arch"
    CONFIG_JOBS = "config:jobs"
    CONFIG_MEMORY = "config:memory"

    DOCTOR_CHECK = "doctor:check"

    def __str__(self) -> str:
        return self.value


# ═══════════════════════════════════════════════════════════════════════════════
# ARGV BUILDERS
# ═══════════════════════════════════════════════════════════════════════════════

def _fixed(*args: str) -> ArgvBuilder:
    return lambda _value: list(args)


def _with_value(*args: str) -> ArgvBuilder:
    return lambda value: [*args, value]


def _kernel_switch(value: str) -> list[str]:
    # "?" asks the executor to list the available refs instead of switching.
    if value == "?":
        return ["kernel", "switch"]
    return ["kernel", "switch", value]


DEFAULT_ARGV: Mapping[ActionID, ArgvBuilder] = {
    ActionID.INIT_WORKSPACE: _fixed("init"),
    ActionID.INIT_MOUNT: _fixed("init", "mount"),
    ActionID.INIT_UNMOUNT: _fixed("init", "unmount"),
    ActionID.INIT_CLONE: _fixed("init", "clone"),
    ActionID.KERNEL_DEFCONFIG: _fixed("kernel", "config"),
    ActionID.KERNEL_TINYCONFIG: _fixed("kernel", "config", "tinyconfig"),
    ActionID.KERNEL_KVMCONFIG: _fixed("kernel", "config", "kvm_guest.config"),
    ActionID.KERNEL_MENUCONFIG: _fixed("kernel", "config", "menuconfig"),
    ActionID.KERNEL_SWITCH: _kernel_switch,
    ActionID.KERNEL_BUILD: _fixed("build"),
    ActionID.KERNEL_CLEAN: _fixed("kernel", "clean"),
    ActionID.MODULE_LIST: _fixed("module", "list"),
    ActionID.MODULE_BUILD: _fixed("module", "build"),
    ActionID.MODULE_BUILD_ONE: _with_value("module", "build"),
    ActionID.MODULE_NEW: _with_value("module", "new"),
    ActionID.MODULE_CLEAN: _fixed("module", "clean"),
    ActionID.APP_LIST: _fixed("app", "list"),
    ActionID.APP_BUILD: _fixed("app", "build"),
    ActionID.APP_BUILD_ONE: _with_value("app", "build"),
    ActionID.APP_NEW: _with_value("app", "new"),
    ActionID.APP_CLEAN: _fixed("app", "clean"),
    ActionID.QEMU_RUN: _fixed("qemu", "run"),
    ActionID.QEMU_GRAPHICAL: _fixed("qemu", "run", "-g"),
    ActionID.QEMU_DEBUG: _fixed("qemu", "debug"),
    ActionID.QEMU_GDB: _fixed("qemu", "gdb"),
    ActionID.ROOTFS_CREATE: _fixed("rootfs", "create"),
    ActionID.ROOTFS_CREATE_CUSTOM: _with_value("rootfs", "create", "-s"),
    ActionID.TOOLCHAIN_STATUS: _fixed("toolchains", "status"),
    ActionID.TOOLCHAIN_INSTALL: _fixed("toolchains", "install"),
    ActionID.TOOLCHAIN_LIST: _fixed("toolchains", "list"),
    ActionID.TOOLCHAIN_SELECT: _with_value("toolchains"),
    ActionID.TOOLCHAIN_BUILD: _fixed("toolchains", "build"),
    ActionID.TOOLCHAIN_ENV: _fixed("toolchains", "env"),
    ActionID.TOOLCHAIN_MENUCONFIG: _fixed("toolchains", "menuconfig"),
    ActionID.TOOLCHAIN_CLEAN: _fixed("toolchains", "clean"),
    ActionID.CONFIG_SHOW: _fixed("config", "show"),
    ActionID.CONFIG_ARCH: _with_value("config", "set", "arch"),
    ActionID.CONFIG_JOBS: _with_value("config", "set", "jobs"),
    ActionID.CONFIG_MEMORY: _with_value("config", "set", "memory"),
    ActionID.DOCTOR_CHECK: _fixed("doctor"),
}


class ActionTable:
    """Mapping from :class:`ActionID` to the argv handed to the executor."""

    def __init__(self, builders: Mapping[ActionID, ArgvBuilder] | None = None):
        self._builders: dict[ActionID, ArgvBuilder] = dict(
            DEFAULT_ARGV if builders is None else builders
        )

    def __contains__(self, action: object) -> bool:
        return action in self._builders

    def __iter__(self) -> Iterator[ActionID]:
        return iter(self._builders)

    def __len__(self) -> int:
        return len(self._builders)

    def missing(self) -> set[ActionID]:
        """Return every ActionID the table has no builder for."""
        return set(ActionID) - set(self._builders)

    def invoke(self, action: ActionID | str, value: str = "") -> list[str]:
        """Build the argument vector for ``action``.

        Args:
            action: Action identifier (enum member or its string value)
            value: Captured input value, empty for fixed actions

        Returns:
            Argument vector for the action executable, without the
            executable itself.

        Raises:
            ValueError: ``action`` is not a known ActionID.
            InvalidMenuNode: the table has no builder for ``action``.
        """
        action_id = ActionID(action)
        builder = self._builders.get(action_id)
        if builder is None:
            raise InvalidMenuNode(f"no argument vector mapped for action '{action_id}'")
        return builder(value)


def check_table(table: ActionTable) -> None:
    """Fail if ``table`` is not total over :class:`ActionID`."""
    missing = table.missing()
    if missing:
        names = ", ".join(sorted(a.value for a in missing))
        raise InvalidMenuNode(f"actions without an argument vector: {names}")


DEFAULT_TABLE = ActionTable()
check_table(DEFAULT_TABLE)


def invoke(action: ActionID | str, value: str = "") -> list[str]:
    """Build the argv for ``action`` from the default table."""
    return DEFAULT_TABLE.invoke(action, value)
