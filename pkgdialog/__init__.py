"""Dialog-driven Arch package installer (pacman + AUR helper + Flatpak).

The user picks packages per category; selections are kept for the whole
session and installed per backend in the order pacman, AUR, Flatpak.
"""

__version__ = "0.1.0"
