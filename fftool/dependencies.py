"""
External tool availability and package manager hints
"""

import shutil

# command -> package that provides it
REQUIRED_TOOLS = {
    'ffmpeg': 'ffmpeg',
    'ffprobe': 'ffmpeg',
}

PACKAGE_MANAGERS = [
    ('pacman', 'sudo pacman -S --noconfirm'),
    ('apt', 'sudo apt install -y'),
    ('dnf', 'sudo dnf install -y'),
    ('brew', 'brew install'),
]


def find_missing_tools(tools=None):
    """Return (missing_commands, packages_to_install)"""
    tools = tools or REQUIRED_TOOLS
    missing_cmds = []
    missing_pkgs = []
    for cmd, pkg in tools.items():
        if shutil.which(cmd) is None:
            missing_cmds.append(cmd)
            if pkg not in missing_pkgs:
                missing_pkgs.append(pkg)
    return missing_cmds, missing_pkgs


def detect_package_manager():
    """Return (name, install command prefix) or (None, None)"""
    for name, install in PACKAGE_MANAGERS:
        if shutil.which(name):
            return name, install
    return None, None


def install_hint(packages):
    """Command line the user can run to install the packages"""
    name, install = detect_package_manager()
    if not name:
        return None
    return f"{install} {' '.join(packages)}"
