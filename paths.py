"""Centralización de rutas de almacenamiento.

Evita repetir os.path.join(...) disperso. Si cambia la estructura, se ajusta aquí.
"""
from __future__ import annotations
import os

# Raíz del repositorio: este archivo vive en la raíz, por lo que dirname(__file__) es la raíz.
REPO_ROOT = os.path.abspath(os.path.dirname(__file__))

DATA_DIR = os.path.join(REPO_ROOT, 'data')
STORAGE_DIR = os.path.join(DATA_DIR, 'storage')
CONFIG_DIR = os.path.join(DATA_DIR, 'config')
EXPORTS_DIR = os.path.join(DATA_DIR, 'exports')
LOGS_DIR = os.path.join(REPO_ROOT, 'logs')

ALL_DIRS = [STORAGE_DIR, CONFIG_DIR, EXPORTS_DIR, LOGS_DIR]


def ensure_dirs() -> None:
    for d in ALL_DIRS:
        os.makedirs(d, exist_ok=True)


__all__ = [
    'REPO_ROOT', 'DATA_DIR', 'STORAGE_DIR', 'CONFIG_DIR', 'EXPORTS_DIR', 'LOGS_DIR',
    'ensure_dirs'
]
