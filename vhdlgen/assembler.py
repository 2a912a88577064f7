"""Assembly of a complete VHDL file from a module description."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import FormattingConfig
from .errors import InvalidArgumentError, OutputError
from .formatting.layout import COMMENT, LineFormatter
from .logging import get_logger
from .models import (
    DocRef,
    Fragment,
    Generate,
    ModuleDescription,
    check_unique,
)
from .ordering import order_declarations
from .postproc.lint import OutputLinter
from .templating.engine import TemplateContext, TemplateEngine

logger = get_logger("assembler")

CONSTANTS_AND_TYPES = "Constants & Types"
FUNCTIONS = "Functions"
PROCEDURES = "Procedures"
COMPONENTS = "Components"
SIGNALS = "Signals"
ALIASES = "Aliases"
ATTRIBUTES = "Attributes"
STATEMENTS = "Concurrent Statements"
PROCESSES = "Processes"
GENERATES = "Generates"
SUB_MODULES = "Sub-Modules"


class _Run:
    """Output buffer and context of a single generation."""

    def __init__(self, context: TemplateContext) -> None:
        self.context = context
        self.lines: List[str] = []

    def blank(self) -> None:
        """Separate blocks with one empty line; never leads or doubles up."""
        if self.lines and self.lines[-1] != "":
            self.lines.append("")

    def extend(self, lines: Iterable[str]) -> None:
        self.lines.extend(lines)

    def text(self) -> str:
        return "\n".join(self.lines)


class DocumentAssembler:
    """Walks a :class:`ModuleDescription` and lays out the VHDL file for it.

    The configuration is fixed for the lifetime of the assembler; build
    another one to generate with different settings.
    """

    def __init__(
        self,
        config: FormattingConfig | None = None,
        formatter: LineFormatter | None = None,
        engine: TemplateEngine | None = None,
        linter: OutputLinter | None = None,
    ) -> None:
        self.config = config or FormattingConfig()
        self.formatter = formatter or LineFormatter(self.config)
        self.engine = engine or TemplateEngine(self.config)
        self.linter = linter or OutputLinter()

    def file_name(self, module: ModuleDescription) -> str:
        return f"{module.entity.name}.{self.config.file_extension}"

    def generate(self, module: ModuleDescription, *, now: datetime | None = None) -> str:
        """Return the complete text of the file for ``module``.

        Validation (duplicate names, dependency cycles, template cycles)
        happens before anything is returned; a failure leaves no output.
        """
        self._validate(module)
        declarations = order_declarations(module.declarations)
        logger.debug(
            "Generating %s (%d declarations, %d processes, %d sub-modules)",
            module.entity.name,
            len(declarations),
            len(module.processes),
            len(module.all_sub_modules()),
        )

        context = self.engine.build_context(
            now=now,
            filename=self.file_name(module),
            description=module.description or module.entity.description,
        )
        run = _Run(context)

        self._emit_file_header(run)
        if self.config.include_sub_header:
            self._emit_sub_header(run, module, declarations)
        self._emit_legal(run)
        self._emit_uses(run, module.uses)
        self._emit_entity(run, module)
        self._emit_architecture(run, module, declarations)

        return self.linter.lint(run.text())

    def write(
        self,
        module: ModuleDescription,
        directory: Path | str,
        *,
        now: datetime | None = None,
    ) -> Path:
        """Generate ``module`` and atomically write it into ``directory``."""
        content = self.generate(module, now=now)
        target_dir = Path(directory)
        target = target_dir / self.file_name(module)
        temp_path: Optional[str] = None
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="\n",
                dir=target_dir,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_path = handle.name
                handle.write(content)
            os.replace(temp_path, target)
        except OSError as exc:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)
            raise OutputError(f"Failed to write {target}: {exc}") from exc
        logger.info("Wrote %s", target)
        return target

    # ------------------------------------------------------------------
    # Validation

    def _validate(self, module: ModuleDescription) -> None:
        owner = f"architecture {module.architecture} of {module.entity.name}"
        check_unique(
            list(module.declarations)
            + list(module.functions)
            + list(module.procedures)
            + module.unique_components()
            + list(module.signals)
            + list(module.aliases)
            + module.attribute_declarations()
            + list(module.processes)
            + list(module.generates)
            + list(module.sub_modules),
            owner,
        )
        for block in module.generates:
            _validate_generate(block, ())

    # ------------------------------------------------------------------
    # Boilerplate

    def _emit_file_header(self, run: _Run) -> None:
        for line in self.engine.expand_lines(self.config.file_header_template, run.context):
            run.extend(self.formatter.comment_text(line))
        run.blank()

    def _emit_sub_header(self, run: _Run, module: ModuleDescription, declarations: Sequence[Any]) -> None:
        entity = module.entity
        groups = [
            ("Generics", entity.generics),
            ("Ports", entity.ports),
            (CONSTANTS_AND_TYPES, declarations),
            (FUNCTIONS, module.functions),
            (PROCEDURES, module.procedures),
            (COMPONENTS, module.unique_components()),
            (SIGNALS, module.signals),
            (ALIASES, module.aliases),
            (ATTRIBUTES, module.attribute_declarations()),
            (PROCESSES, module.processes),
            (GENERATES, module.generates),
            (SUB_MODULES, module.sub_modules),
        ]
        run.extend(self._manifest(f"{entity.name} (entity)", groups))

        pending = list(module.generates)
        while pending:
            block = pending.pop(0)
            if block.children():
                run.lines.append(COMMENT)
                run.extend(
                    self._manifest(
                        f"{block.name} (generate)",
                        [
                            (PROCESSES, block.processes),
                            (GENERATES, block.generates),
                            (SUB_MODULES, block.sub_modules),
                        ],
                    )
                )
            pending.extend(block.generates)

        flower = self.formatter.flower_line()
        if flower:
            run.lines.append(flower)
        run.blank()

    def _manifest(self, title: str, groups: Sequence[Tuple[str, Sequence[Any]]]) -> List[str]:
        present = [(f"{label}:", items) for label, items in groups if items]
        lines = [f"{COMMENT} {title}"]
        if not present:
            return lines
        column = max(len(label) for label, _ in present) + 1
        head = f"{COMMENT}   "
        for label, items in present:
            names = ", ".join(item.name for item in items)
            lines.extend(
                self.formatter.wrap_line(
                    names,
                    head + label.ljust(column),
                    continuation_prefix=head + " " * column,
                    fallback_prefix=head,
                )
            )
        return lines

    def _emit_legal(self, run: _Run) -> None:
        flower = self.formatter.flower_line()
        for block in (self.engine.expand_copyright(run.context), self.engine.expand_license(run.context)):
            if not block:
                continue
            for line in block:
                run.extend(self.formatter.comment_text(f"{COMMENT} {line}" if line.strip() else COMMENT))
            if flower:
                run.lines.append(flower)
        run.blank()

    def _emit_uses(self, run: _Run, uses: Sequence[str]) -> None:
        libraries: Dict[str, List[str]] = {}
        for entry in uses:
            library = entry.split(".", 1)[0]
            libraries.setdefault(library.lower(), [library]).append(entry)
        for library, *entries in libraries.values():
            run.lines.append(f"library {library};")
            run.extend(f"use {entry};" for entry in entries)
            run.blank()

    # ------------------------------------------------------------------
    # Entity and architecture

    def _emit_entity(self, run: _Run, module: ModuleDescription) -> None:
        run.extend(self.formatter.format_comment(module.entity))
        self._emit_fragments(run, module.entity.render(self.config), 0)
        run.blank()

    def _emit_architecture(
        self,
        run: _Run,
        module: ModuleDescription,
        declarations: Sequence[Any],
    ) -> None:
        config = self.config
        run.lines.append(f"architecture {module.architecture} of {module.entity.name} is")
        run.blank()

        self._emit_section(run, CONSTANTS_AND_TYPES, declarations, 1)
        self._emit_section(run, FUNCTIONS, module.functions, 1)
        self._emit_section(run, PROCEDURES, module.procedures, 1)
        self._emit_section(run, COMPONENTS, module.unique_components(), 1)
        self._emit_section(run, SIGNALS, module.signals, 1)
        self._emit_section(run, ALIASES, module.aliases, 1)
        self._emit_attributes(run, module, 1)

        run.lines.append("begin")
        run.blank()

        self._emit_statements(run, module.statements, 1)
        self._emit_section(run, PROCESSES, module.processes, 1)
        self._emit_section(run, GENERATES, module.generates, 1, emit=self._emit_generate)
        self._emit_section(run, SUB_MODULES, module.sub_modules, 1)

        closing = ["end"]
        if config.add_optional_type_names:
            closing.append("architecture")
        if config.add_optional_names:
            closing.append(module.architecture)
        run.lines.append(" ".join(closing) + ";")

    def _emit_section(
        self,
        run: _Run,
        title: str,
        items: Sequence[Any],
        level: int,
        emit: Callable[[_Run, Any, int], None] | None = None,
    ) -> None:
        if not items:
            return
        emit = emit or self._emit_item
        self._banner(run, self.config.section_start_template, title, level)
        for item in items:
            emit(run, item, level)
            run.blank()
        self._banner(run, self.config.section_end_template, title, level)
        run.blank()

    def _emit_attributes(self, run: _Run, module: ModuleDescription, level: int) -> None:
        declarations = module.attribute_declarations()
        if not declarations:
            return
        self._banner(run, self.config.section_start_template, ATTRIBUTES, level)
        for declaration in declarations:
            self._emit_item(run, declaration, level)
            for spec in module.attributes:
                if spec.declaration is declaration:
                    self._emit_item(run, spec, level)
            run.blank()
        self._banner(run, self.config.section_end_template, ATTRIBUTES, level)
        run.blank()

    def _emit_statements(self, run: _Run, statements: Sequence[str], level: int) -> None:
        if not statements:
            return
        self._banner(run, self.config.section_start_template, STATEMENTS, level)
        for statement in statements:
            run.extend(self.formatter.code_lines(statement, level))
        run.blank()
        self._banner(run, self.config.section_end_template, STATEMENTS, level)
        run.blank()

    def _emit_item(self, run: _Run, item: Any, level: int) -> None:
        entries = item.doc_entries() if hasattr(item, "doc_entries") else None
        run.extend(self.formatter.format_comment(item, level, entries))
        self._emit_fragments(run, item.render(self.config), level)

    def _emit_generate(self, run: _Run, block: Generate, level: int) -> None:
        run.extend(self.formatter.format_comment(block, level))
        run.extend(self.formatter.code_lines(f"{block.name}: {block.statement} generate", level))
        inner = level + 1
        for statement in block.statements:
            run.extend(self.formatter.code_lines(statement, inner))
        if block.statements:
            run.blank()
        self._emit_section(run, PROCESSES, block.processes, inner)
        self._emit_section(run, GENERATES, block.generates, inner, emit=self._emit_generate)
        self._emit_section(run, SUB_MODULES, block.sub_modules, inner)
        closing = "end generate"
        if self.config.add_optional_names:
            closing += f" {block.name}"
        run.extend(self.formatter.code_lines(closing + ";", level))

    def _emit_fragments(self, run: _Run, fragments: Sequence[Fragment], level: int) -> None:
        for fragment in fragments:
            if isinstance(fragment, DocRef):
                depth = level + fragment.depth
                if fragment.brief:
                    run.extend(self.formatter.doc_line(fragment.item, depth))
                else:
                    run.extend(self.formatter.format_comment(fragment.item, depth))
            else:
                run.extend(self.formatter.code_lines(fragment.text, level + fragment.depth))

    def _banner(self, run: _Run, template: Optional[str], title: str, level: int) -> None:
        if not template:
            return
        scoped = run.context.with_items(param=title)
        for line in self.engine.expand_lines([template], scoped):
            run.extend(self.formatter.comment_text(line, level))


def _validate_generate(block: Generate, ancestors: Tuple[int, ...]) -> None:
    if id(block) in ancestors:
        raise InvalidArgumentError(f"Generate block {block.name} contains itself")
    if block.is_empty():
        raise InvalidArgumentError(f"Generate block {block.name} is empty")
    check_unique(block.children(), f"generate block {block.name}")
    for child in block.generates:
        _validate_generate(child, ancestors + (id(block),))


def generate(
    module: ModuleDescription,
    config: FormattingConfig | None = None,
    now: datetime | None = None,
) -> str:
    """Generate ``module`` with a throwaway :class:`DocumentAssembler`."""
    return DocumentAssembler(config).generate(module, now=now)


__all__ = ["DocumentAssembler", "generate"]
