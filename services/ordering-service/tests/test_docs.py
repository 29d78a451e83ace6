from __future__ import annotations

import importlib
import re
from pathlib import Path

import pytest

INDEX = Path(__file__).resolve().parents[1] / "docs" / "index.rst"


def _documented_modules() -> list[str]:
    return re.findall(r"^\.\. automodule:: (\S+)$", INDEX.read_text(), flags=re.MULTILINE)


def test_docs_index_documents_modules():
    assert "qfoods.domain.service" in _documented_modules()


@pytest.mark.parametrize("module", _documented_modules())
def test_documented_module_imports(module):
    importlib.import_module(module)
