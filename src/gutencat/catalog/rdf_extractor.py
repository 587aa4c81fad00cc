"""Metadata extractor for Project Gutenberg RDF/XML records."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from lxml import etree

from gutencat.catalog.models import ExtractedMetadata
from gutencat.catalog.normalization import normalize_whitespace
from gutencat.errors import ExtractionError

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
DCTERMS_NS = "http://purl.org/dc/terms/"
PGTERMS_NS = "http://www.gutenberg.org/2009/pgterms/"

_NAMESPACES = {"rdf": RDF_NS, "dcterms": DCTERMS_NS, "pgterms": PGTERMS_NS}
_RDF_ABOUT = f"{{{RDF_NS}}}about"
_RDF_RESOURCE = f"{{{RDF_NS}}}resource"


@runtime_checkable
class MetadataExtractor(Protocol):
    """Contract for anything that turns a document path into metadata."""

    def extract(self, path: Path) -> ExtractedMetadata:
        """Return title/author/language or raise ExtractionError."""


class RdfMetadataExtractor:
    """Extract title, author and language from an RDF/XML ebook record."""

    def extract(self, path: Path) -> ExtractedMetadata:
        source = Path(path)
        try:
            xml_bytes = source.read_bytes()
        except OSError as exc:
            raise ExtractionError(source, f"Failed to read metadata document: {exc}") from exc

        parser = etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False)
        try:
            root = etree.fromstring(xml_bytes, parser=parser)
        except etree.XMLSyntaxError as exc:
            raise ExtractionError(source, f"Malformed RDF document: {exc}") from exc
        if root is None:
            raise ExtractionError(source, "Empty RDF document")

        return ExtractedMetadata(
            title=self._extract_title(root),
            author=self._extract_author(root),
            language=self._extract_language(root),
        )

    def _extract_title(self, root: etree._Element) -> str | None:
        for node in root.iterfind(".//dcterms:title", _NAMESPACES):
            text = "".join(node.itertext())
            if text.strip():
                return text
        return None

    def _extract_author(self, root: etree._Element) -> str | None:
        for creator in root.iterfind(".//dcterms:creator", _NAMESPACES):
            name = self._first_text(creator.findall(".//pgterms:name", _NAMESPACES))
            if name:
                return name

            resource = creator.get(_RDF_RESOURCE)
            if resource:
                agent = self._find_agent(root, resource)
                if agent is not None:
                    name = self._first_text(agent.findall("pgterms:name", _NAMESPACES))
                    if name:
                        return name
        return None

    def _extract_language(self, root: etree._Element) -> str | None:
        for language in root.iterfind(".//dcterms:language", _NAMESPACES):
            value = self._first_text(language.findall(".//rdf:value", _NAMESPACES))
            if value:
                return value
        return None

    def _find_agent(self, root: etree._Element, resource: str) -> etree._Element | None:
        agents = root.findall(".//pgterms:agent", _NAMESPACES)
        for agent in agents:
            if agent.get(_RDF_ABOUT) == resource:
                return agent
        # rdf:about and rdf:resource may disagree on the xml:base prefix
        for agent in agents:
            about = agent.get(_RDF_ABOUT) or ""
            if about and (about.endswith(resource) or resource.endswith(about)):
                return agent
        return None

    def _first_text(self, nodes: list[etree._Element]) -> str | None:
        for node in nodes:
            text = normalize_whitespace(" ".join(node.itertext()))
            if text:
                return text
        return None
