"""
Classy Console Output
======================

Rich terminal rendering of a decoded class file: a header panel, then
trees for the constant pool, methods, fields and class attributes.

Constant pool entries are shown with their index, ``CONSTANT_<Kind>``
label and a resolved rendering (``java/lang/Object.<init>:()V`` for a
method reference, the quoted text for a string).  An entry whose
references do not resolve is rendered inline in red; the rest of the
tree is unaffected.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from shared.console import ClassyConsole

from classy.core.errors import ClassFileError
from classy.core.models import (
    AnalysisResult,
    ClassConstant,
    ClassFile,
    ClassSummary,
    ConstantPool,
    ConstantPoolEntry,
    DoubleConstant,
    FieldRefConstant,
    FloatConstant,
    IntegerConstant,
    InterfaceMethodRefConstant,
    InvokeDynamicConstant,
    LongConstant,
    MemberSummary,
    MethodHandleConstant,
    MethodRefConstant,
    MethodTypeConstant,
    NameAndTypeConstant,
    StringConstant,
    Utf8Constant,
)


# ---------------------------------------------------------------------------
# Entry rendering
# ---------------------------------------------------------------------------

def _shorten(text: str, limit: int) -> str:
    if limit > 0 and len(text) > limit:
        return text[: max(limit - 3, 0)] + "..."
    return text


def _quote(text: str, limit: int) -> str:
    escaped = text.encode("unicode_escape").decode("ascii").replace('"', '\\"')
    return '"' + _shorten(escaped, limit) + '"'


def describe_entry(
    entry: ConstantPoolEntry,
    pool: ConstantPool,
    max_string_length: int = 80,
) -> str:
    """Render one constant pool entry with its references resolved.

    Args:
        entry:             The entry to render.
        pool:              Pool the entry's indices point into.
        max_string_length: Truncate quoted text beyond this many characters
                           (``0`` disables truncation).

    Raises:
        IndexResolutionError: If one of the entry's references is invalid.
    """
    if isinstance(entry, Utf8Constant):
        return _quote(entry.value, max_string_length)
    if isinstance(entry, StringConstant):
        return _quote(pool.utf8(entry.string_index), max_string_length)
    if isinstance(entry, ClassConstant):
        return pool.utf8(entry.name_index)
    if isinstance(entry, (IntegerConstant, LongConstant)):
        return str(entry.value)
    if isinstance(entry, (FloatConstant, DoubleConstant)):
        return repr(entry.value)
    if isinstance(entry, (FieldRefConstant, MethodRefConstant, InterfaceMethodRefConstant)):
        owner = pool.class_name(entry.class_index)
        name, descriptor = pool.name_and_type(entry.name_and_type_index)
        return f"{owner}.{name}:{descriptor}"
    if isinstance(entry, NameAndTypeConstant):
        return f"{pool.utf8(entry.name_index)}:{pool.utf8(entry.descriptor_index)}"
    if isinstance(entry, MethodHandleConstant):
        owner, name, descriptor = pool.member_ref(entry.reference_index)
        return f"{entry.kind_name} {owner}.{name}:{descriptor}"
    if isinstance(entry, MethodTypeConstant):
        return pool.utf8(entry.descriptor_index)
    if isinstance(entry, InvokeDynamicConstant):
        name, descriptor = pool.name_and_type(entry.name_and_type_index)
        return f"#{entry.bootstrap_method_attr_index}:{name}:{descriptor}"
    return entry.kind


def _declaration_text(member: MemberSummary) -> Text:
    text = Text()
    if member.modifiers:
        text.append(" ".join(member.modifiers) + " ", style="classy.modifier")
    text.append(member.type or "?", style="classy.type")
    text.append(" ")
    text.append(member.name or f"#{member.index}", style="classy.name")
    if member.kind == "method":
        text.append("(")
        text.append(", ".join(member.parameters), style="classy.type")
        text.append(")")
    return text


# ---------------------------------------------------------------------------
# ClassyConsoleOutput
# ---------------------------------------------------------------------------

class ClassyConsoleOutput:
    """Tree-style terminal display of an :class:`AnalysisResult`.

    Usage::

        output = ClassyConsoleOutput()
        output.display(engine.analyze("Main.class"))

    Args:
        console:            Console to print on; a new one if omitted.
        show_constant_pool: Render the constant pool tree.
        show_attributes:    Render per-member and class attribute names.
        max_string_length:  Truncation limit for quoted pool text.
    """

    def __init__(
        self,
        console: ClassyConsole | None = None,
        *,
        show_constant_pool: bool = True,
        show_attributes: bool = True,
        max_string_length: int = 80,
    ) -> None:
        self._console = console or ClassyConsole()
        self._show_constant_pool = show_constant_pool
        self._show_attributes = show_attributes
        self._max_string_length = max_string_length

    def display(self, result: AnalysisResult) -> None:
        """Render everything enabled for *result*."""
        self.display_header(result)
        if self._show_constant_pool:
            self.display_constant_pool(result.class_file)
        self.display_members("Methods", result.summary.methods)
        self.display_members("Fields", result.summary.fields)
        if self._show_attributes:
            self.display_attributes(result.summary)
        self.display_problems(result.summary)

    # ------------------------------------------------------------------ #
    #  Header
    # ------------------------------------------------------------------ #

    def display_header(self, result: AnalysisResult) -> None:
        summary = result.summary
        class_file = result.class_file

        magic = Text(f"0x{class_file.magic:08X} ")
        if summary.magic_valid:
            magic.append("valid", style="classy.success")
        else:
            magic.append("INVALID", style="classy.error")

        table = Table.grid(padding=(0, 2))
        table.add_column(style="classy.info", justify="right")
        table.add_column()
        table.add_row("File", Text(result.path))
        table.add_row("SHA-256", Text(result.sha256, style="classy.dim"))
        table.add_row("Magic", magic)
        table.add_row("Major", str(class_file.major_version))
        table.add_row("Minor", str(class_file.minor_version))
        table.add_row("Java", summary.java_release)
        table.add_row("Declaration", self._class_declaration(summary))

        self._console.print(
            Panel(table, title="Class File", border_style="bright_cyan", expand=False)
        )

    @staticmethod
    def _class_declaration(summary: ClassSummary) -> Text:
        text = Text()
        if summary.modifiers:
            text.append(" ".join(summary.modifiers) + " ", style="classy.modifier")
        text.append(summary.kind + " ", style="classy.modifier")
        text.append(summary.name or "?", style="classy.name")
        if summary.super_name and summary.super_name != "java.lang.Object":
            text.append(" extends ")
            text.append(summary.super_name, style="classy.type")
        if summary.interfaces:
            text.append(" implements " if summary.kind == "class" else " extends ")
            text.append(", ".join(summary.interfaces), style="classy.type")
        return text

    # ------------------------------------------------------------------ #
    #  Trees
    # ------------------------------------------------------------------ #

    def display_constant_pool(self, class_file: ClassFile) -> None:
        """Render every real pool entry; placeholder slots are skipped."""
        pool = class_file.constant_pool
        real_entries = sum(1 for _ in pool.entries())
        tree = Tree(
            Text.assemble(
                ("Constant Pool", "classy.section"),
                f" ({real_entries} entries, count={pool.count})",
            )
        )
        width = len(str(len(pool)))

        for index, entry in pool.entries():
            label = Text.assemble(
                (f"#{index:0{width}d}", "classy.index"),
                " ",
                (entry.kind, "classy.kind"),
                "  ",
            )
            try:
                label.append(
                    describe_entry(entry, pool, self._max_string_length),
                    style="classy.literal",
                )
            except ClassFileError as exc:
                label.append(f"<{exc}>", style="classy.error")
            tree.add(label)

        self._console.print(tree)

    def display_members(self, title: str, members: list[MemberSummary]) -> None:
        tree = Tree(
            Text.assemble((title, "classy.section"), f" ({len(members)} entries)")
        )
        for member in members:
            node = tree.add(_declaration_text(member))
            if self._show_attributes:
                for attr_name in member.attributes:
                    node.add(Text(attr_name, style="classy.dim"))
        self._console.print(tree)

    def display_attributes(self, summary: ClassSummary) -> None:
        tree = Tree(
            Text.assemble(
                ("Attributes", "classy.section"), f" ({len(summary.attributes)} entries)"
            )
        )
        for attr_name in summary.attributes:
            tree.add(Text(attr_name))
        self._console.print(tree)

    def display_problems(self, summary: ClassSummary) -> None:
        if not summary.problems:
            return
        tree = Tree(
            Text.assemble(
                ("Unresolved References", "classy.error"),
                f" ({len(summary.problems)})",
            )
        )
        for problem in summary.problems:
            tree.add(
                Text.assemble((problem.location, "classy.warning"), ": ", problem.message)
            )
        self._console.print(tree)
