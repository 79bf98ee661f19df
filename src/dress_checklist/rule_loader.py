"""
Rule definition loader.

Reads command rule definitions from a YAML document (primary format) or
from the legacy ``<commandRules>`` XML document and returns validated
RuleDefinition objects. Building the lookup table is left to RuleTable.

YAML format:
    version: "1.0"
    rules:
      - id: 8
        name: pajamas
        description: Take off pajamas
        outcomes:
          - mode: HOT
            message: Removing PJs
          - mode: COLD
            message: Removing PJs

Legacy XML format:
    <commandRules>
      <commandRule id="1" name="footwear">
        <responses>
          <response type="HOT">
            <message>sandals</message>
            <error>false</error>
            <requiredItems><requiredItem>8</requiredItem></requiredItems>
          </response>
        </responses>
      </commandRule>
    </commandRules>
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging
import xml.etree.ElementTree as ET

from pydantic import ValidationError
import yaml

from dress_checklist.definitions import RuleDefinition, RuleDocument

logger = logging.getLogger(__name__)


YAML_SUFFIXES = {".yaml", ".yml"}
XML_SUFFIXES = {".xml"}


class RuleLoadError(Exception):
    """Raised when a rule definition file cannot be loaded."""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        message = f"Failed to load '{file_path}': {reason}"
        super().__init__(message)


def load_rules(path: Union[str, Path]) -> List[RuleDefinition]:
    """
    Load rule definitions from a file.

    Args:
        path: Path to a .yaml/.yml or .xml rule document

    Returns:
        Rule definitions in declaration order

    Raises:
        RuleLoadError: If the file is missing, malformed or has an
            unsupported format
    """
    file_path = Path(path)

    if not file_path.is_file():
        raise RuleLoadError(str(file_path), "File not found")

    suffix = file_path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        raw = _read_yaml(file_path)
    elif suffix in XML_SUFFIXES:
        raw = _read_xml(file_path)
    else:
        raise RuleLoadError(str(file_path), f"Unsupported rule file format '{suffix}'")

    try:
        document = RuleDocument.model_validate(raw)
    except ValidationError as e:
        raise RuleLoadError(str(file_path), f"Invalid rule definition: {e}")

    logger.debug(
        "Loaded %d rule definition(s) from %s (version %s)",
        len(document.rules), file_path, document.version
    )
    return list(document.rules)


def parse_rules(raw: Dict[str, Any], source: str = "<memory>") -> List[RuleDefinition]:
    """Validate an already parsed rule document."""
    try:
        return list(RuleDocument.model_validate(raw).rules)
    except ValidationError as e:
        raise RuleLoadError(source, f"Invalid rule definition: {e}")


def _read_yaml(file_path: Path) -> Dict[str, Any]:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuleLoadError(str(file_path), f"YAML parse error: {e}")
    except UnicodeDecodeError as e:
        raise RuleLoadError(str(file_path), f"File is not valid UTF-8: {e}")
    except OSError as e:
        raise RuleLoadError(str(file_path), str(e))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuleLoadError(str(file_path), "Top level of a rule document must be a mapping")
    return data


def _read_xml(file_path: Path) -> Dict[str, Any]:
    try:
        root = ET.parse(file_path).getroot()
    except ET.ParseError as e:
        raise RuleLoadError(str(file_path), f"XML parse error: {e}")
    except OSError as e:
        raise RuleLoadError(str(file_path), str(e))

    if root.tag != "commandRules":
        raise RuleLoadError(
            str(file_path),
            f"Expected <commandRules> root element, found <{root.tag}>"
        )

    rules = []
    for rule_elem in root.findall("commandRule"):
        outcomes = []
        responses = rule_elem.find("responses")
        if responses is not None:
            for response in responses.findall("response"):
                outcomes.append(_xml_response(response, file_path))

        rules.append({
            "id": rule_elem.get("id"),
            "name": rule_elem.get("name"),
            "description": rule_elem.get("description"),
            "outcomes": outcomes,
        })

    return {"rules": rules}


def _xml_response(response: ET.Element, file_path: Path) -> Dict[str, Any]:
    """Convert a <response> element into an outcome mapping."""
    required = []
    group = response.find("requiredItems")
    if group is not None:
        required = [
            (item.text or "").strip() for item in group.findall("requiredItem")
        ]

    return {
        "type": response.get("type"),
        "message": _xml_text(response, "message"),
        "error": _xml_bool(_xml_text(response, "error"), file_path),
        "requires": required,
    }


def _xml_text(element: ET.Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None:
        return None
    return child.text or ""


def _xml_bool(value: Optional[str], file_path: Path) -> bool:
    """Parse an xs:boolean lexical value."""
    if value is None:
        return False
    text = value.strip().lower()
    if text in ("true", "1"):
        return True
    if text in ("false", "0"):
        return False
    raise RuleLoadError(str(file_path), f"Invalid boolean value '{value}'")
