# tests/conftest.py
"""Utilidades de configuración comunes para la batería de pruebas."""
from __future__ import annotations

import sys
from pathlib import Path

# Repo root = parent de 'tests'
ROOT = Path(__file__).resolve().parents[1]

# Asegura que el paquete ``src`` es importable sin instalar el proyecto
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)
