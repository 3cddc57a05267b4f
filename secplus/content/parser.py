"""
Corpus parser and JSON file I/O.

Parses the raw study corpus (domains -> sections -> bullets) into immutable
models, and reads/writes the pipeline's JSON files.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from .errors import UnsupportedFormatError
from .models import CorpusDomain, CorpusSection, RawCorpus


def read_json(path: Path | str) -> Any:
    """Load a UTF-8 JSON file. Missing files raise FileNotFoundError."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path | str, obj: Any) -> Path:
    """
    Write JSON by whole-file replace.

    The payload goes to a temporary file next to the target which is then
    renamed over it, so a failed run leaves the previous file untouched.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(obj, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug(f"Wrote {path}")
    return path


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class CorpusParser:
    """Parser for the raw hierarchical study corpus."""

    ACCEPTED_SHAPES = ["an object with { domains: [ { domain_num, sections: [...] } ] }"]

    def parse_file(self, path: Path | str) -> RawCorpus:
        """Parse a corpus file."""
        return self.parse(read_json(path), source=path)

    def parse(self, data: Any, source: Path | str | None = None) -> RawCorpus:
        """Parse an already-loaded corpus payload."""
        if not isinstance(data, dict) or not isinstance(data.get("domains"), list):
            raise UnsupportedFormatError(self.ACCEPTED_SHAPES, source, what="corpus")

        domains = []
        for raw_domain in data["domains"]:
            if not isinstance(raw_domain, dict):
                continue
            sections = tuple(
                self._parse_section(raw_section)
                for raw_section in _as_list(raw_domain.get("sections"))
                if isinstance(raw_section, dict)
            )
            domains.append(
                CorpusDomain(
                    domain_num=_as_int(raw_domain.get("domain_num")),
                    name=str(raw_domain.get("name") or raw_domain.get("domain") or ""),
                    sections=sections,
                )
            )

        practice = data.get("practice_questions")
        corpus = RawCorpus(
            domains=tuple(domains),
            practice_questions=practice if isinstance(practice, dict) else {},
        )
        logger.debug(
            f"Parsed corpus: {len(corpus.domains)} domains, {corpus.total_bullets} bullets"
        )
        return corpus

    def _parse_section(self, raw: dict) -> CorpusSection:
        section_num = raw.get("section_num")
        bullets = tuple(b if isinstance(b, str) else "" for b in _as_list(raw.get("bullets")))
        return CorpusSection(
            section_num="" if section_num is None else str(section_num),
            name=str(raw.get("name") or raw.get("section") or ""),
            bullets=bullets,
        )
