"""Git for Windows answer-file options.

The Git for Windows installer is built with Inno Setup and accepts an
INI answer file via ``/LOADINF``. Each user-editable choice is an
enumeration of the values the installer understands; the defaults below
are the unattended CI configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from ephemeral_runner.constants import GIT_INSTALL_DIR


class EditorOption(str, Enum):
    """Default editor used by git."""

    VIM = "VIM"
    NANO = "Nano"
    NOTEPAD = "Notepad"
    NOTEPADPLUSPLUS = "Notepad++"
    VSCODE = "VisualStudioCode"


class PathOption(str, Enum):
    """How git is exposed on PATH (shell integration)."""

    BASH_ONLY = "BashOnly"
    CMD = "Cmd"
    CMD_TOOLS = "CmdTools"


class CRLFOption(str, Enum):
    """Line-ending conversion policy."""

    CRLF_ALWAYS = "CRLFAlways"
    CRLF_COMMIT_AS_IS = "CRLFCommitAsIs"
    LF_ONLY = "LFOnly"


class SymlinkOption(str, Enum):
    """Symbolic link support."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"


class CredentialManagerOption(str, Enum):
    """Credential helper integration."""

    CORE = "Core"
    DISABLED = "Disabled"


class SSHOption(str, Enum):
    """SSH client used by git."""

    OPENSSH = "OpenSSH"
    EXTERNAL = "ExternalOpenSSH"
    PLINK = "Plink"


class DefaultBranchOption(str, Enum):
    """Initial branch name for ``git init``; empty keeps git's default."""

    GIT_DEFAULT = ""
    MAIN = "main"


class PullBehaviorOption(str, Enum):
    """Behaviour of ``git pull``."""

    MERGE = "Merge"
    REBASE = "Rebase"
    FF_ONLY = "FFOnly"


class TerminalOption(str, Enum):
    """Terminal emulator used by Git Bash."""

    CONHOST = "ConHost"
    MINTTY = "MinTTY"


@dataclass(slots=True, frozen=True)
class GitInstallOptions:
    """Fixed answer-file values for an unattended Git install.

    Attributes:
        install_dir: Target directory (``Dir``)
        path_option: Shell integration (``PathOption``)
        editor: Default editor (``EditorOption``)
        crlf: Line-ending policy (``CRLFOption``)
        symlinks: Symlink support (``EnableSymlinks``)
        credential_manager: Credential helper (``UseCredentialManager``)
        ssh: SSH client (``SSHOption``)
        default_branch: Initial branch (``DefaultBranchOption``)
        pull_behavior: Pull mode (``GitPullBehaviorOption``)
        terminal: Console mode (``BashTerminalOption``)

    """

    install_dir: str = GIT_INSTALL_DIR
    path_option: PathOption = PathOption.CMD
    editor: EditorOption = EditorOption.VIM
    crlf: CRLFOption = CRLFOption.CRLF_ALWAYS
    symlinks: SymlinkOption = SymlinkOption.DISABLED
    credential_manager: CredentialManagerOption = CredentialManagerOption.CORE
    ssh: SSHOption = SSHOption.OPENSSH
    default_branch: DefaultBranchOption = DefaultBranchOption.GIT_DEFAULT
    pull_behavior: PullBehaviorOption = PullBehaviorOption.FF_ONLY
    terminal: TerminalOption = TerminalOption.CONHOST

    @classmethod
    def from_mapping(cls, values: dict[str, str]) -> GitInstallOptions:
        """Build options from raw INI strings, keeping defaults for gaps.

        Args:
            values: Mapping of field name to raw string value

        Returns:
            Parsed options

        Raises:
            ValueError: If a value is not a member of its enumeration

        """
        kwargs: dict[str, Any] = {}
        defaults = cls()
        for field in fields(cls):
            if field.name not in values:
                continue
            raw = values[field.name]
            current = getattr(defaults, field.name)
            if isinstance(current, Enum):
                kwargs[field.name] = type(current)(raw)
            else:
                kwargs[field.name] = raw
        return cls(**kwargs)

    def to_inf(self) -> str:
        """Render the options as an Inno Setup ``[Setup]`` answer file."""
        entries = {
            "Lang": "default",
            "Dir": self.install_dir,
            "Group": "Git",
            "NoIcons": "0",
            "SetupType": "default",
            "Components": "gitlfs,assoc,assoc_sh",
            "Tasks": "",
            "EditorOption": self.editor.value,
            "CustomEditorPath": "",
            "DefaultBranchOption": self.default_branch.value,
            "PathOption": self.path_option.value,
            "SSHOption": self.ssh.value,
            "TortoiseOption": "false",
            "CURLOption": "WinSSL",
            "CRLFOption": self.crlf.value,
            "BashTerminalOption": self.terminal.value,
            "GitPullBehaviorOption": self.pull_behavior.value,
            "UseCredentialManager": self.credential_manager.value,
            "PerformanceTweaksFSCache": "Enabled",
            "EnableSymlinks": self.symlinks.value,
            "EnablePseudoConsoleSupport": "Disabled",
            "EnableFSMonitor": "Disabled",
        }
        lines = ["[Setup]"]
        lines.extend(f"{key}={value}" for key, value in entries.items())
        return "\r\n".join(lines) + "\r\n"
