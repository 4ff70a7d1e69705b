"""Installers for Git for Windows and the GitHub Actions runner."""
