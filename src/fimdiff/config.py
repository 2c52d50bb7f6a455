"""Reading nodiff entries out of agent configuration files.

Agent configuration is XML. Nodiff entries live in the ``<syscheck>`` block::

    <ossec_config>
      <syscheck>
        <nodiff>/etc/ssl/private.key</nodiff>
        <nodiff type="sregex">.test$</nodiff>
      </syscheck>
    </ossec_config>

An entry without a ``type`` attribute is a literal path; otherwise ``type`` names the
matcher variant (see MatcherKind). Everything outside ``<nodiff>`` elements is ignored.
"""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Tuple

from fimdiff.exceptions import ConfigError
from fimdiff.types import MatcherKind, PathType

log = logging.getLogger(__name__)

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def parse_nodiff_entries(content: str, source: str = "<string>") -> List[Tuple[MatcherKind, str]]:
    """Extract the nodiff entries from configuration text.

    Agent configuration files may hold several top-level blocks, which is not a
    well-formed XML document; the content is wrapped in a single root before parsing.

    Args:
        content: The configuration text.
        source: Name used in error messages.

    Returns:
        List of (kind, expression) pairs in document order.

    Raises:
        ConfigError: If the text is not valid XML, an entry is empty, or an entry has an
            unknown type.

    Example:
        >>> parse_nodiff_entries('<syscheck><nodiff type="sregex">.test$</nodiff></syscheck>')
        [(<MatcherKind.SREGEX: 'sregex'>, '.test$')]
    """
    body = _XML_DECLARATION.sub("", content, count=1)
    try:
        root = ET.fromstring(f"<fimdiff_root>{body}</fimdiff_root>")
    except ET.ParseError as e:
        raise ConfigError(f"Invalid XML: {e}", source=source)

    entries: List[Tuple[MatcherKind, str]] = []
    for syscheck in root.iter("syscheck"):
        for element in syscheck.iter("nodiff"):
            expression = (element.text or "").strip()
            if not expression:
                raise ConfigError("Empty nodiff entry", source=source)

            kind_name = element.get("type", MatcherKind.LITERAL.value).strip().lower()
            try:
                kind = MatcherKind(kind_name)
            except ValueError:
                raise ConfigError(f"Unknown nodiff type {kind_name!r}", source=source)

            entries.append((kind, expression))

    return entries


def read_nodiff_entries(config_file: PathType) -> List[Tuple[MatcherKind, str]]:
    """Read the nodiff entries from an agent configuration file.

    Args:
        config_file: Path to the configuration file.

    Returns:
        List of (kind, expression) pairs in document order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is malformed.
    """
    path = Path(config_file)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    entries = parse_nodiff_entries(content, source=str(path))
    if not entries:
        log.debug("No nodiff entries in %s", path)
    return entries
