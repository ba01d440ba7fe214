"""Declaration extractor for Doxygen-generated HTML reference pages."""

from __future__ import annotations

import logging
import re

from lxml import html

from typelink.core.models import (
    Declaration,
    EnumDeclaration,
    EnumValue,
    Method,
    NamespaceInfo,
    Parameter,
    Property,
    Visibility,
)
from typelink.documents.models import SourceDocument, has_class, text_of

logger = logging.getLogger(__name__)

_CLASS_TITLE = re.compile(
    r"^(?:(?P<namespace>.+)::)?(?P<name>[^:]+?)\s+"
    r"(?:Class|Interface|Struct)(?:\s+Template)?\s+Reference"
)
_NAMESPACE_TITLE = re.compile(r"^(?P<name>.+?)\s+Namespace\s+Reference")
_TITLE_MODIFIERS = re.compile(r"(?:\s+(?:abstract|final))+\s*$", re.IGNORECASE)
_METHOD_SIGNATURE = re.compile(r"^(?P<name>~?\w+)\s*\((?P<params>.*)\)(?P<modifiers>.*)$")
_PARAMETER_NAME = re.compile(r"^(?P<type>.*?[\s*&>])(?P<name>[A-Za-z_]\w*)$")
_INHERITS_TEXT = re.compile(r"Inherits (.+?)\.")
_ENUM_BODY = re.compile(r"\{([^}]*)\}")
_ENUM_DETAIL_NAME = re.compile(r"enum\s+(?:class\s+)?(?:.+::)*(\w+)")

_QT_DECORATORS = ("Q_INVOKABLE", "Q_SCRIPTABLE")
_LEFT_KEYWORDS = re.compile(r"\b(?:Q_INVOKABLE|Q_SCRIPTABLE|static|virtual)\b")

_METHOD_SECTIONS = (
    ("pub-methods", Visibility.PUBLIC),
    ("pro-methods", Visibility.PROTECTED),
)


def escape_name(name: str) -> str:
    """Doxygen's case-insensitive file name escaping, e.g. ``KWin::Window`` -> ``_k_win_1_1_window``."""
    escaped = []
    for char in name:
        if char == ":":
            escaped.append("_1")
        elif char == "_":
            escaped.append("__")
        elif char.isupper():
            escaped.append("_" + char.lower())
        else:
            escaped.append(char)
    return "".join(escaped)


def class_page_name(full_name: str) -> str:
    """File name Doxygen gives the reference page of a class."""
    return f"class{escape_name(full_name)}.html"


def split_parameters(text: str) -> list[str]:
    """Split a parameter list on commas outside of ``<>``, ``()``, and ``[]``."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    for char in text:
        if char in "<([":
            depth += 1
        elif char in ">)]":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


def parse_parameter(text: str, position: int) -> Parameter | None:
    """Parse ``const QString &name = QString()`` into a Parameter."""
    declaration, _, default = text.partition("=")
    declaration = declaration.strip()
    if not declaration or declaration == "void":
        return None

    match = _PARAMETER_NAME.match(declaration)
    if match and match.group("type").strip() not in ("", "const"):
        type_text = match.group("type").strip()
        name = match.group("name")
    else:
        type_text = declaration
        name = f"arg{position}"

    return Parameter(name=name, type=type_text, default_value=default.strip() or None)


class DoxygenExtractor:
    """Extracts declarations and namespace enums from Doxygen HTML.

    Args:
        scriptable_only: Keep only methods and slots marked Q_INVOKABLE or
            Q_SCRIPTABLE, i.e. the members exposed to scripting.
    """

    def __init__(self, scriptable_only: bool = False) -> None:
        self.scriptable_only = scriptable_only

    def extract_declaration(self, document: SourceDocument) -> Declaration | None:
        raw_title = document.title()
        title = _TITLE_MODIFIERS.sub("", raw_title).strip()
        match = _CLASS_TITLE.match(title)
        if match is None:
            logger.debug("No class found in %s (title %r)", document.source, raw_title)
            return None

        namespace = match.group("namespace") or ""
        name = match.group("name").strip()
        full_name = f"{namespace}::{name}" if namespace else name
        description = text_of(document.first(f"//*[{has_class('textblock')}]")) or None

        methods: list[Method] = []
        for section, visibility in _METHOD_SECTIONS:
            methods.extend(self._methods(document, section, visibility))
        slots = self._methods(document, "pub-slots", Visibility.PUBLIC)
        if self.scriptable_only:
            methods = [m for m in methods if m.decorators]
            slots = [s for s in slots if s.decorators]

        declaration = Declaration(
            name=name,
            namespace=namespace,
            full_name=full_name,
            inheritance=self._inheritance(document),
            enums=self._enums(document),
            methods=methods,
            slots=slots,
            signals=self._signals(document),
            properties=self._properties(document),
            description=description,
            is_abstract=_is_abstract(raw_title, description),
        )
        logger.info("Parsed class %s from %s", full_name, document.source)
        return declaration

    def extract_namespace(self, document: SourceDocument) -> NamespaceInfo | None:
        match = _NAMESPACE_TITLE.match(document.title())
        if match is None:
            return None

        full_name = match.group("name").strip()
        info = NamespaceInfo(
            name=full_name.rsplit("::", 1)[-1],
            full_name=full_name,
            enums=self._enums(document),
        )
        logger.info("Parsed namespace %s (%d enums)", full_name, len(info.enums))
        return info

    # Sections

    def _section_rows(self, document: SourceDocument, section: str) -> list[html.HtmlElement]:
        anchor = document.first("//a[@id=$section or @name=$section]", section=section)
        if anchor is None:
            return []
        tables = anchor.xpath("ancestor::table[1]")
        if not tables:
            return []
        return tables[0].xpath(".//tr[starts-with(@class, 'memitem:')]")

    def _methods(
        self, document: SourceDocument, section: str, visibility: Visibility
    ) -> list[Method]:
        methods = []
        for row in self._section_rows(document, section):
            method = self._method(row, visibility)
            if method is not None:
                methods.append(method)
        return methods

    def _method(self, row: html.HtmlElement, visibility: Visibility) -> Method | None:
        left, right = _cells(row)
        match = _METHOD_SIGNATURE.match(right)
        if match is None:
            return None

        left_words = left.split()
        modifiers = match.group("modifiers")
        parameters = []
        for position, part in enumerate(split_parameters(match.group("params")), start=1):
            parameter = parse_parameter(part, position)
            if parameter is not None:
                parameters.append(parameter)

        return Method(
            name=match.group("name"),
            return_type=" ".join(_LEFT_KEYWORDS.sub("", left).split()) or "void",
            parameters=parameters,
            visibility=visibility,
            is_static="static" in left_words,
            is_const=bool(re.search(r"\bconst\b", modifiers)),
            is_virtual="virtual" in left_words,
            is_override="override" in modifiers,
            is_abstract="= 0" in modifiers,
            decorators=[d for d in _QT_DECORATORS if d in left_words],
            description=_row_description(row),
        )

    def _signals(self, document: SourceDocument) -> list[Method]:
        signals = self._methods(document, "signals", Visibility.PUBLIC)
        for signal in signals:
            signal.return_type = "void"
            signal.decorators.append("signal")
        return signals

    def _properties(self, document: SourceDocument) -> list[Property]:
        properties = []
        for row in self._section_rows(document, "properties"):
            left, right = _cells(row)
            type_text = " ".join(re.sub(r"\b(?:static|Q_PROPERTY)\b", "", left).split())
            if not type_text or not right:
                continue
            labels = _detail_labels(document, row)
            properties.append(
                Property(
                    name=right.split()[0],
                    type=type_text,
                    readonly=bool(labels) and "write" not in labels,
                    description=_row_description(row),
                )
            )
        return properties

    def _inheritance(self, document: SourceDocument) -> list[str]:
        parents: list[str] = []
        for header in document.xpath(f"//tr[{has_class('inherit_header')}]"):
            text = text_of(header)
            if "inherited from" not in text:
                continue
            links = header.xpath(".//a")
            parent = text_of(links[-1]) if links else text.split("inherited from", 1)[1].strip()
            if parent and parent not in parents:
                parents.append(parent)

        if parents:
            return parents

        match = _INHERITS_TEXT.search(text_of(document.first(f"//*[{has_class('textblock')}]")))
        if match:
            parents = [p.strip() for p in match.group(1).split(",") if p.strip()]
        return parents

    # Enums

    def _enums(self, document: SourceDocument) -> list[EnumDeclaration]:
        enums: dict[str, EnumDeclaration] = {}

        rows = document.xpath(
            f"//table[{has_class('memberdecls')}]//tr[starts-with(@class, 'memitem:')]"
        )
        for row in rows:
            left, right = _cells(row)
            if "enum" not in left.split():
                continue
            name = right.split("{", 1)[0].split()
            body = _ENUM_BODY.search(right)
            if not name or body is None:
                continue
            values = _enum_values(body.group(1))
            if values and name[-1] not in enums:
                enums[name[-1]] = EnumDeclaration(
                    name=name[-1], values=values, description=_row_description(row)
                )

        self._merge_enum_details(document, enums)
        return list(enums.values())

    def _merge_enum_details(
        self, document: SourceDocument, enums: dict[str, EnumDeclaration]
    ) -> None:
        """Add value descriptions from the detailed ``fieldtable`` sections."""
        for item in document.xpath(f"//div[{has_class('memitem')}]"):
            match = _ENUM_DETAIL_NAME.search(text_of(_first(item, ".//td[@class='memname']")))
            if match is None:
                continue

            enum = enums.get(match.group(1))
            if enum is None:
                enum = EnumDeclaration(name=match.group(1))
            known = {value.name: value for value in enum.values}

            for field_row in item.xpath(f".//table[{has_class('fieldtable')}]//tr[td]"):
                value_name = text_of(_first(field_row, f"./td[{has_class('fieldname')}]"))
                if not value_name:
                    continue
                description = text_of(_first(field_row, f"./td[{has_class('fielddoc')}]")) or None
                if value_name in known:
                    known[value_name].description = description or known[value_name].description
                else:
                    value = EnumValue(name=value_name, description=description)
                    enum.values.append(value)
                    known[value_name] = value

            if enum.values and enum.name not in enums:
                enums[enum.name] = enum


def _first(element: html.HtmlElement, expression: str) -> html.HtmlElement | None:
    found = element.xpath(expression)
    return found[0] if found else None


def _cells(row: html.HtmlElement) -> tuple[str, str]:
    left = text_of(_first(row, f"./td[{has_class('memItemLeft')}]"))
    right = text_of(_first(row, f"./td[{has_class('memItemRight')}]"))
    return left, right


def _row_description(row: html.HtmlElement) -> str | None:
    following = row.getnext()
    if following is None or not following.get("class", "").startswith("memdesc:"):
        return None
    return text_of(_first(following, f"./td[{has_class('mdescRight')}]")) or None


def _detail_labels(document: SourceDocument, row: html.HtmlElement) -> set[str]:
    """``read``/``write``/... labels of the detailed entry a member row links to."""
    link = _first(row, f"./td[{has_class('memItemRight')}]//a[starts-with(@href, '#')]")
    if link is None:
        return set()
    target = link.get("href")[1:]
    item = document.first(
        f"//a[@id=$target]/following::div[{has_class('memitem')}][1]", target=target
    )
    if item is None:
        return set()
    return {text_of(label).lower() for label in item.xpath(f".//span[{has_class('mlabel')}]")}


def _enum_values(body: str) -> list[EnumValue]:
    values = []
    for part in body.split(","):
        name, _, value = part.partition("=")
        name = name.strip()
        if name:
            values.append(EnumValue(name=name, value=value.strip() or None))
    return values


def _is_abstract(title: str, description: str | None) -> bool:
    if re.search(r"\babstract\s*$", title, re.IGNORECASE):
        return True
    text = (description or "").lower()
    return "abstract" in text or "pure virtual" in text
