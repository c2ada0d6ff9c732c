"""Shared test helpers: package records, universes and on-disk repositories."""

from __future__ import annotations

import gzip
from pathlib import Path
from xml.sax.saxutils import quoteattr

from rpmsolve.core import PackageRecord, Requirement, Universe

_Rel = Requirement | str | tuple


def req(
    name: str,
    flags: str | None = None,
    version: str | None = None,
    epoch: int | None = None,
) -> Requirement:
    """Shorthand for ``Requirement.from_flags``."""
    return Requirement.from_flags(name, flags, version, epoch)


def _as_requirement(rel: _Rel) -> Requirement:
    if isinstance(rel, Requirement):
        return rel
    if isinstance(rel, str):
        return Requirement(rel)
    return req(*rel)


def record(
    name: str,
    version: str,
    epoch: int = 0,
    requires: list[_Rel] | None = None,
    suggests: list[_Rel] | None = None,
    provides: list[str] | None = None,
) -> PackageRecord:
    """Build a record; by default the package provides its own name."""
    return PackageRecord(
        name=name,
        version=version,
        epoch=epoch,
        requires=tuple(_as_requirement(r) for r in requires or ()),
        suggests=tuple(_as_requirement(r) for r in suggests or ()),
        provides=tuple([name] if provides is None else provides),
    )


def build_universe(*records: PackageRecord) -> Universe:
    return Universe.build(records)


def find(universe: Universe, name: str, version: str) -> int:
    """Solvable id of the package *name* at *version*."""
    for solvable in universe.packages_named(name):
        if universe.solvable(solvable).version == version:
            return solvable
    raise KeyError(f"{name}-{version}")


# ---------------------------------------------------------------------------
# On-disk repositories
# ---------------------------------------------------------------------------

REPOMD_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<repomd xmlns="http://linux.duke.edu/metadata/repo" xmlns:rpm="http://linux.duke.edu/metadata/rpm">
  <revision>1700000000</revision>
{data}
</repomd>
"""

DATA_TEMPLATE = """  <data type="{type}">
    <checksum type="sha256">{checksum}</checksum>
    <location href="{href}"/>
  </data>"""


def _entry(rel: _Rel) -> str:
    r = _as_requirement(rel)
    attrs = [f"name={quoteattr(r.name)}"]
    if r.operator is not None:
        attrs.append(f'flags="{r.operator.value}"')
    if r.epoch is not None:
        attrs.append(f'epoch="{r.epoch}"')
    if r.version is not None:
        attrs.append(f"ver={quoteattr(r.version)}")
    return f"<rpm:entry {' '.join(attrs)}/>"


def _relation(tag: str, rels) -> str:
    if not rels:
        return ""
    entries = "".join(_entry(r) for r in rels)
    return f"<rpm:{tag}>{entries}</rpm:{tag}>"


def primary_xml(packages: list[dict]) -> str:
    """Render primary.xml for package dicts with keys
    name, version, epoch, requires, suggests, provides."""
    body = []
    for pkg in packages:
        provides = pkg.get("provides", [pkg["name"]])
        body.append(
            '<package type="rpm">'
            f"<name>{pkg['name']}</name><arch>x86_64</arch>"
            f'<version epoch="{pkg.get("epoch", 0)}" ver={quoteattr(pkg["version"])} rel="1.fc38"/>'
            "<format>"
            + _relation("provides", provides)
            + _relation("requires", pkg.get("requires", []))
            + _relation("suggests", pkg.get("suggests", []))
            + "</format></package>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<metadata xmlns="http://linux.duke.edu/metadata/common" '
        'xmlns:rpm="http://linux.duke.edu/metadata/rpm" '
        f'packages="{len(packages)}">\n' + "\n".join(body) + "\n</metadata>\n"
    )


def repomd_xml(hrefs: dict[str, str]) -> str:
    data = "\n".join(
        DATA_TEMPLATE.format(type=t, checksum="0" * 64, href=h) for t, h in hrefs.items()
    )
    return REPOMD_TEMPLATE.format(data=data)


def write_repository(root: Path, packages: list[dict], compress: bool = True) -> Path:
    """Write repodata/ for *packages* under *root* and return *root*."""
    repodata = root / "repodata"
    repodata.mkdir(parents=True, exist_ok=True)
    content = primary_xml(packages).encode()
    if compress:
        href = "repodata/abc123-primary.xml.gz"
        (root / href).write_bytes(gzip.compress(content))
    else:
        href = "repodata/abc123-primary.xml"
        (root / href).write_bytes(content)
    (repodata / "repomd.xml").write_text(repomd_xml({"primary": href}))
    return root
