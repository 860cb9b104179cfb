"""Shared fixtures: a small solution on disk."""

from pathlib import Path

import pytest

TOKEN = "b77a5c561934e089"

SOLUTION = """\
<Solution>
  <Folder Name="/Libs/">
    <Project Path="C/C.csproj" />
  </Folder>
  <Project Path="L/L.csproj" />
  <Project Path="A/A.csproj" />
  <Project Path="B/B.csproj" />
  <Project Path="D/D.csproj" />
</Solution>
"""

SDK_PROJECT = """\
<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
  </PropertyGroup>
{items}
</Project>
"""

LEGACY_PROJECT = """\
<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
{items}
</Project>
"""


def write_project(root: Path, name: str, items: str = "", legacy: bool = False) -> Path:
    """Write ``root/name/name.csproj`` with the given item groups."""
    path = root / name / f"{name}.csproj"
    path.parent.mkdir(parents=True, exist_ok=True)
    template = LEGACY_PROJECT if legacy else SDK_PROJECT
    path.write_text(template.format(items=items), encoding="utf-8")
    return path


@pytest.fixture
def solution_dir(tmp_path: Path) -> Path:
    """Solution with L referenced by A (SDK style), B (legacy) and D (strong name).

    C already sits in the Libs folder.
    """
    (tmp_path / "App.slnx").write_text(SOLUTION, encoding="utf-8")
    write_project(tmp_path, "C")
    write_project(tmp_path, "L")
    write_project(
        tmp_path,
        "A",
        '  <ItemGroup>\n    <ProjectReference Include="..\\L\\L.csproj" />\n  </ItemGroup>',
    )
    write_project(
        tmp_path,
        "B",
        '  <ItemGroup>\n    <ProjectReference Include="..\\L\\L.csproj" />\n'
        '    <ProjectReference Include="..\\C\\C.csproj" />\n  </ItemGroup>',
        legacy=True,
    )
    write_project(
        tmp_path,
        "D",
        "  <ItemGroup>\n"
        f'    <Reference Include="L, Version=1.0.0.0, Culture=neutral, PublicKeyToken={TOKEN}">\n'
        "      <HintPath>..\\L\\bin\\L.dll</HintPath>\n"
        "    </Reference>\n"
        '    <Reference Include="System.Data" />\n'
        "  </ItemGroup>",
    )
    return tmp_path


@pytest.fixture
def solution_path(solution_dir: Path) -> Path:
    return solution_dir / "App.slnx"
