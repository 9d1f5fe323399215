"""
Render an EmitPlan as Java source and write it out.

The layout matches the jlox sources the generated tree classes replace: one
file per base type, the Visitor interface nested first, then each variant as
a static nested class, then the abstract accept() at the bottom. Region
markers (//> and //<) are emitted unchanged so regenerated files diff cleanly.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import List, Sequence, Union
from typing_extensions import TypeAlias

from .builder import EmitPlan, VariantDecl, build
from .config import DEFAULT_CONFIG, EmitConfig
from .errors import IOFailure
from .model import GrammarSpec

logger = logging.getLogger(__name__)

PathLike: TypeAlias = Union[str, "os.PathLike[str]"]


def wrap_params(params: Sequence[str], config: EmitConfig = DEFAULT_CONFIG) -> str:
    """Join constructor parameters, one per line once the list is too wide."""
    single = ", ".join(params)
    if len(single) <= config.wrap_width:
        return single
    return (",\n" + config.continuation_indent).join(params)


def unwrap_params(text: str, config: EmitConfig = DEFAULT_CONFIG) -> str:
    """Inverse of wrap_params: reflow a wrapped parameter list onto one line."""
    return text.replace(",\n" + config.continuation_indent, ", ")


def _define_visitor(out: List[str], plan: EmitPlan, ind: str) -> None:
    out.append(f"{ind}interface {plan.visitor.name}<R> {{")
    for method in plan.visitor.methods:
        out.append(f"{ind * 2}R {method.name}({method.variant} {method.param_name});")
    out.append(f"{ind}}}")


def _define_type(out: List[str], plan: EmitPlan, decl: VariantDecl, config: EmitConfig) -> None:
    ind = config.indent
    region = f"{plan.tag}-{decl.name.lower()}"
    accept = plan.base.accept_method

    out.append(f"//> {region}")
    out.append(f"{ind}static class {decl.name} extends {decl.base} {{")

    # Constructor. Wrapping only affects this line.
    out.append(f"{ind * 2}{decl.name}({wrap_params(decl.params, config)}) {{")
    for slot in decl.slots:
        out.append(f"{ind * 3}this.{slot} = {slot};")
    out.append(f"{ind * 2}}}")

    # Visitor pattern.
    out.append("")
    out.append(f"{ind * 2}@Override")
    out.append(f"{ind * 2}<R> R {accept}({plan.visitor.name}<R> visitor) {{")
    out.append(f"{ind * 3}return visitor.{decl.visit_method}(this);")
    out.append(f"{ind * 2}}}")

    if decl.fields:
        out.append("")
        for field in decl.fields:
            out.append(f"{ind * 2}final {field.render()};")

    out.append(f"{ind}}}")
    out.append(f"//< {region}")


def render(plan: EmitPlan, config: EmitConfig = DEFAULT_CONFIG) -> str:
    ind = config.indent
    base = plan.base.name
    out: List[str] = []

    out.append(f"//> Appendix II {plan.tag}")
    out.append(f"package {config.package};")
    out.append("")
    if config.imports:
        out.extend(f"import {name};" for name in config.imports)
        out.append("")
    out.append(f"abstract class {base} {{")

    _define_visitor(out, plan, ind)

    out.append("")
    out.append(f"{ind}// Nested {base} classes here...")
    for decl in plan.variants:
        _define_type(out, plan, decl, config)

    out.append("")
    out.append(f"{ind}abstract <R> R {plan.base.accept_method}({plan.visitor.name}<R> visitor);")
    out.append("}")
    out.append(f"//< Appendix II {plan.tag}")

    return "\n".join(out) + "\n"


def artifact_name(plan: EmitPlan, config: EmitConfig = DEFAULT_CONFIG) -> str:
    return plan.base.name + config.extension


def _artifact_mode(target: Path) -> int:
    """Mode for the replacement file: keep an existing artifact's, else 0o666 less the umask."""
    if target.is_file():
        return stat.S_IMODE(target.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write(plan: EmitPlan, directory: PathLike, config: EmitConfig = DEFAULT_CONFIG) -> Path:
    """Render plan and replace <directory>/<artifact_name> with the result.

    The text goes to a temporary sibling first, so a failed write never
    leaves a truncated artifact behind.
    """
    text = render(plan, config)
    name = artifact_name(plan, config)
    target = Path(directory) / name
    tmp_path = None

    try:
        mode = _artifact_mode(target)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=str(directory))
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
    except OSError as exc:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise IOFailure(target, exc.strerror or str(exc)) from exc

    logger.info("wrote %s (%d variants)", target, len(plan.variants))
    return target


def emit(spec: GrammarSpec, directory: PathLike, config: EmitConfig = DEFAULT_CONFIG) -> Path:
    return write(build(spec), directory, config)
