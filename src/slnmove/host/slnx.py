"""Host backed by an XML solution file (.slnx) and its MSBuild project files.

Solution layout::

    <Solution>
      <Folder Name="/Libs/">
        <Project Path="ClassLibrary1/ClassLibrary1.csproj" />
      </Folder>
      <Project Path="App/App.csproj" />
    </Solution>

References are read from the project files: ``<ProjectReference>`` items
become path references, ``<Reference>`` items become strong-name
references when their Include carries a public key token. Removing a
project from the solution drops the ProjectReference items that point at
it, as the IDE does. Nothing is written until ``save()``.
"""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path, PureWindowsPath

from slnmove.graph.ProjectNode import Handle, NodeKind, ProjectIdentity
from slnmove.graph.relations import ReferenceDescriptor
from slnmove.host import (
    HostDuplicateReferenceError,
    HostError,
    HostRefusedError,
    ProjectFileMissingError,
    StaleHandleError,
)

logger = logging.getLogger(__name__)


def _folder_key(name: str) -> str:
    name = name.strip("/")
    if "/" in name:
        raise HostRefusedError(f"'{name}' is a nested folder; only top-level folders are supported")
    return f"/{name}/"


def _native(path: str) -> str:
    return path.replace("\\", "/")


def _parse(path: Path) -> ET.ElementTree:
    # Comments are kept so saving does not strip them from user files.
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    return ET.parse(path, parser=parser)


def _indent_unit(root: ET.Element) -> str:
    text = root.text or ""
    if "\n" in text and not text.strip():
        unit = text.rsplit("\n", 1)[1]
        if unit:
            return unit
    return "  "


def _append(parent: ET.Element, child: ET.Element, depth: int, unit: str) -> None:
    """Append ``child`` to ``parent`` (at ``depth``), indenting only the new element."""
    if len(parent):
        child.tail = parent[-1].tail
        parent[-1].tail = "\n" + unit * (depth + 1)
    else:
        parent.text = "\n" + unit * (depth + 1)
        child.tail = "\n" + unit * depth
    parent.append(child)


def _insert(parent: ET.Element, index: int, child: ET.Element, depth: int, unit: str) -> None:
    if index >= len(parent):
        _append(parent, child, depth, unit)
        return
    child.tail = "\n" + unit * (depth + 1)
    parent.insert(index, child)


def _remove(parent: ET.Element, child: ET.Element) -> None:
    """Remove ``child`` and hand its trailing whitespace to the previous sibling."""
    index = list(parent).index(child)
    if index == len(parent) - 1 and index > 0:
        parent[index - 1].tail = child.tail
    parent.remove(child)
    if not len(parent):
        parent.text = None


class _ProjectFile:
    """A parsed MSBuild project file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.had_declaration = path.read_text(encoding="utf-8-sig").lstrip().startswith("<?xml")
        self.tree = _parse(path)
        root = self.tree.getroot()
        self.ns = root.tag[1 : root.tag.index("}")] if root.tag.startswith("{") else ""
        self.unit = _indent_unit(root)
        self.dirty = False

    def tag(self, name: str) -> str:
        return f"{{{self.ns}}}{name}" if self.ns else name

    def references(self) -> list[ReferenceDescriptor]:
        root = self.tree.getroot()
        result = []
        for item in root.iter(self.tag("ProjectReference")):
            include = item.get("Include", "")
            if include:
                result.append(ReferenceDescriptor.from_path(include))
        for item in root.iter(self.tag("Reference")):
            include = item.get("Include", "")
            if not include:
                continue
            try:
                result.append(ReferenceDescriptor.parse_strong_name(include))
            except ValueError:
                hint = item.find(self.tag("HintPath"))
                name = include.split(",")[0].strip()
                path = hint.text.strip() if hint is not None and hint.text else ""
                result.append(ReferenceDescriptor.from_path(path, name))
        return result

    def resolve_include(self, include: str) -> str:
        return os.path.normpath(os.path.join(self.path.parent, _native(include)))

    def drop_project_references(self, target: str) -> int:
        """Remove ProjectReference items resolving to ``target``.

        An ItemGroup left without children is removed as well.
        """
        root = self.tree.getroot()
        parents = {child: parent for parent in root.iter() for child in parent}
        dropped = 0
        for group in list(root.iter(self.tag("ItemGroup"))):
            emptied = False
            for item in group.findall(self.tag("ProjectReference")):
                if self.resolve_include(item.get("Include", "")) == target:
                    _remove(group, item)
                    dropped += 1
                    emptied = not len(group)
            if emptied:
                _remove(parents[group], group)
        if dropped:
            self.dirty = True
        return dropped

    def add_project_reference(self, target: str) -> None:
        include = str(PureWindowsPath(os.path.relpath(target, self.path.parent)))
        root = self.tree.getroot()
        group = None
        for candidate in root.findall(self.tag("ItemGroup")):
            if candidate.find(self.tag("ProjectReference")) is not None:
                group = candidate
                break
        if group is None:
            group = ET.Element(self.tag("ItemGroup"))
            _append(root, group, 0, self.unit)
        item = ET.Element(self.tag("ProjectReference"), {"Include": include})
        _append(group, item, 1, self.unit)
        self.dirty = True

    def save(self) -> None:
        if self.ns:
            ET.register_namespace("", self.ns)
        self.tree.getroot().tail = "\n"
        self.tree.write(self.path, encoding="utf-8", xml_declaration=self.had_declaration)
        self.dirty = False


class SlnxHost:
    """A ProjectHost over a ``.slnx`` solution file.

    Args:
        solution_path: Path to the ``.slnx`` file.
        read_only: Refuse every structural mutation.
    """

    def __init__(self, solution_path: Path, read_only: bool = False) -> None:
        self.solution_path = Path(solution_path)
        self.read_only = read_only
        try:
            self._tree = _parse(self.solution_path)
        except (OSError, ET.ParseError) as e:
            raise HostError(f"Cannot read solution {self.solution_path}: {e}") from e
        self._root = self._tree.getroot()
        self._unit = _indent_unit(self._root)
        self._projects: dict[str, _ProjectFile | None] = {}
        self._scope = 0
        self._dirty = False

    @property
    def solution_dir(self) -> Path:
        return self.solution_path.parent

    # ─────────────────────────────────────────────────────────────────────
    # ProjectHost
    # ─────────────────────────────────────────────────────────────────────

    def list_projects(self) -> list[tuple[ProjectIdentity, Handle]]:
        return [
            (ProjectIdentity(self._stem(element)), self._handle(element))
            for element in self._root.iter("Project")
            if element.get("Path")
        ]

    def list_references(self, handle: Handle) -> list[ReferenceDescriptor]:
        project_file = self._project_file(self._resolve(handle).get("Path", ""))
        if project_file is None:
            return []
        return project_file.references()

    def find_top_level_node_by_name(self, name: str) -> Handle | None:
        key = _folder_key(name)
        for folder in self._root.findall("Folder"):
            if folder.get("Name") == key:
                return Handle(key, NodeKind.CONTAINER, self._scope)
        for element in self._root.findall("Project"):
            if element.get("Path") and self._stem(element) == name:
                return self._handle(element)
        return None

    def create_grouping_container(self, name: str) -> Handle:
        if self.read_only:
            raise HostRefusedError(f"Solution {self.solution_path.name} is read-only")
        if self.find_top_level_node_by_name(name) is not None:
            raise HostRefusedError(f"A top-level node named '{name}' already exists")
        key = _folder_key(name)
        folder = ET.Element("Folder", {"Name": key})
        _insert(self._root, self._first_project_index(), folder, 0, self._unit)
        self._dirty = True
        return Handle(key, NodeKind.CONTAINER, self._scope)

    def move_into_container(self, handle: Handle, container: Handle) -> Handle:
        if self.read_only:
            raise HostRefusedError(f"Solution {self.solution_path.name} is read-only")
        element = self._resolve(handle)
        folder = self._folder(container)
        rel_path = element.get("Path", "")
        abs_path = self._absolute(rel_path)

        # Removal
        _remove(self._parent_of(element), element)
        dropped = 0
        for other in self._root.iter("Project"):
            project_file = self._project_file(other.get("Path", ""))
            if project_file is not None:
                dropped += project_file.drop_project_references(abs_path)
        self._scope += 1
        self._dirty = True
        logger.debug("Removed %s (%d project references dropped)", rel_path, dropped)

        if not os.path.isfile(abs_path):
            raise ProjectFileMissingError(f"Project file '{rel_path}' not found")

        _append(folder, element, 1, self._unit)
        return self._handle(element)

    def add_reference(self, holder: Handle, referenced: Handle) -> None:
        if self.read_only:
            raise HostRefusedError(f"Solution {self.solution_path.name} is read-only")
        holder_element = self._resolve(holder)
        target_element = self._resolve(referenced)
        project_file = self._project_file(holder_element.get("Path", ""))
        if project_file is None:
            raise HostError(f"Project file '{holder_element.get('Path')}' not found")
        target_name = self._stem(target_element)
        if any(ref.matches(target_name) for ref in project_file.references()):
            raise HostDuplicateReferenceError(
                f"'{self._stem(holder_element)}' already references '{target_name}'"
            )
        project_file.add_project_reference(self._absolute(target_element.get("Path", "")))

    # ─────────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────────

    def pending_files(self) -> list[Path]:
        """Files ``save()`` would write."""
        files = [self.solution_path] if self._dirty else []
        files.extend(p.path for p in self._projects.values() if p is not None and p.dirty)
        return files

    def save(self) -> list[Path]:
        """Write the solution and every modified project file.

        Returns:
            The files written.
        """
        written = self.pending_files()
        if self._dirty:
            self._root.tail = "\n"
            self._tree.write(self.solution_path, encoding="utf-8")
            self._dirty = False
        for project_file in self._projects.values():
            if project_file is not None and project_file.dirty:
                project_file.save()
        for path in written:
            logger.info("Wrote %s", path)
        return written

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    @staticmethod
    def _stem(element: ET.Element) -> str:
        return PureWindowsPath(element.get("Path", "")).stem

    def _absolute(self, rel_path: str) -> str:
        return os.path.normpath(os.path.join(self.solution_dir, _native(rel_path)))

    def _handle(self, element: ET.Element) -> Handle:
        return Handle(element.get("Path", ""), NodeKind.PROJECT, self._scope)

    def _resolve(self, handle: Handle) -> ET.Element:
        if handle.kind == NodeKind.PROJECT and handle.scope == self._scope:
            for element in self._root.iter("Project"):
                if element.get("Path") == handle.token:
                    return element
        raise StaleHandleError(handle)

    def _folder(self, handle: Handle) -> ET.Element:
        if handle.kind == NodeKind.CONTAINER:
            for folder in self._root.findall("Folder"):
                if folder.get("Name") == handle.token:
                    return folder
        raise StaleHandleError(handle)

    def _parent_of(self, element: ET.Element) -> ET.Element:
        for parent in self._root.iter():
            if element in list(parent):
                return parent
        raise StaleHandleError(self._handle(element))

    def _first_project_index(self) -> int:
        for index, child in enumerate(self._root):
            if child.tag == "Project":
                return index
        return len(self._root)

    def _project_file(self, rel_path: str) -> _ProjectFile | None:
        if rel_path not in self._projects:
            path = Path(self._absolute(rel_path))
            try:
                self._projects[rel_path] = _ProjectFile(path)
            except FileNotFoundError:
                logger.warning("Project file %s not found, treating it as unloaded", path)
                self._projects[rel_path] = None
            except ET.ParseError as e:
                raise HostError(f"Cannot parse {path}: {e}") from e
        return self._projects[rel_path]
