"""LibCST Transformers for code fixes."""

import logging
from typing import Optional, Union

import libcst as cst
from libcst.helpers import get_full_name_for_node

from sealed_class_verification.domain.constants import (
    DEFAULT_FINAL_MODULE,
    FINAL_DECORATOR,
    FINAL_MODULES,
)

logger = logging.getLogger(__name__)


def dotted_expr(dotted: str) -> Union[cst.Name, cst.Attribute]:
    """Build a Name/Attribute chain for a dotted path like "a.b.c"."""
    parts = dotted.split(".")
    expr: Union[cst.Name, cst.Attribute] = cst.Name(parts[0])
    for part in parts[1:]:
        expr = cst.Attribute(value=expr, attr=cst.Name(part))
    return expr


def decorator_short_names(node: cst.ClassDef) -> set[str]:
    names: set[str] = set()
    for decorator in node.decorators:
        full_name = get_full_name_for_node(decorator.decorator)
        if full_name:
            names.add(full_name.split(".")[-1])
    return names


def top_level_index(module: cst.Module, class_path: Optional[str]) -> Optional[int]:
    """Index of the top-level statement that defines the outermost name of class_path."""
    if not class_path:
        return None
    outermost = class_path.split(".")[0]
    for idx, stmt in enumerate(module.body):
        if isinstance(stmt, (cst.ClassDef, cst.FunctionDef)) and stmt.name.value == outermost:
            return idx
    return None


def _top_level_imports(
    module: cst.Module, before: Optional[int] = None
) -> list[tuple[int, cst.SimpleStatementLine, Union[cst.Import, cst.ImportFrom]]]:
    """Module-level imports, restricted to statements above index `before` when given."""
    found = []
    for idx, stmt in enumerate(module.body):
        if before is not None and idx >= before:
            break
        if not isinstance(stmt, cst.SimpleStatementLine):
            continue
        for item in stmt.body:
            if isinstance(item, (cst.Import, cst.ImportFrom)):
                found.append((idx, stmt, item))
    return found


def _from_module_name(item: cst.ImportFrom) -> Optional[str]:
    if item.relative or item.module is None:
        return None
    return get_full_name_for_node(item.module)


def imports_name(module: cst.Module, module_name: str, name: str, before: Optional[int] = None) -> bool:
    """True if `name` is importable unaliased from `module_name` at module level."""
    for _, _, item in _top_level_imports(module, before):
        if not isinstance(item, cst.ImportFrom) or _from_module_name(item) != module_name:
            continue
        if isinstance(item.names, cst.ImportStar):
            return True
        for alias in item.names:
            if alias.asname is None and get_full_name_for_node(alias.name) == name:
                return True
    return False


def imports_module(module: cst.Module, module_name: str, before: Optional[int] = None) -> bool:
    """True if `import module_name` (unaliased) is present at module level."""
    for _, _, item in _top_level_imports(module, before):
        if not isinstance(item, cst.Import):
            continue
        for alias in item.names:
            if alias.asname is None and get_full_name_for_node(alias.name) == module_name:
                return True
    return False


def binds_name(module: cst.Module, name: str, exclude_module: str, before: Optional[int] = None) -> bool:
    """True if a module-level def, class, assignment or import other than from `exclude_module` binds `name`."""
    for idx, stmt in enumerate(module.body):
        if before is not None and idx >= before:
            break
        if isinstance(stmt, (cst.ClassDef, cst.FunctionDef)) and stmt.name.value == name:
            return True
        if not isinstance(stmt, cst.SimpleStatementLine):
            continue
        for item in stmt.body:
            if isinstance(item, cst.Assign) and any(
                isinstance(target.target, cst.Name) and target.target.value == name for target in item.targets
            ):
                return True
            if isinstance(item, cst.ImportFrom) and not isinstance(item.names, cst.ImportStar):
                if _from_module_name(item) == exclude_module:
                    continue
                for alias in item.names:
                    bound = alias.asname.name if alias.asname else alias.name
                    if get_full_name_for_node(bound) == name:
                        return True
            if isinstance(item, cst.Import):
                for alias in item.names:
                    if alias.asname and get_full_name_for_node(alias.asname.name) == name:
                        return True
    return False


def _is_docstring(stmt: cst.CSTNode) -> bool:
    if not isinstance(stmt, cst.SimpleStatementLine) or not stmt.body:
        return False
    first = stmt.body[0]
    return isinstance(first, cst.Expr) and isinstance(first.value, (cst.SimpleString, cst.ConcatenatedString))


def _is_import_line(stmt: cst.CSTNode) -> bool:
    return isinstance(stmt, cst.SimpleStatementLine) and all(
        isinstance(item, (cst.Import, cst.ImportFrom)) for item in stmt.body
    )


def _import_insert_index(module: cst.Module) -> int:
    """End of the leading block of docstring and imports, ahead of any other statement."""
    idx = 1 if module.body and _is_docstring(module.body[0]) else 0
    while idx < len(module.body) and _is_import_line(module.body[idx]):
        idx += 1
    return idx


def _insert_import(module: cst.Module, import_item: Union[cst.Import, cst.ImportFrom]) -> cst.Module:
    insert_idx = _import_insert_index(module)
    after_docstring = insert_idx == 1 and _is_docstring(module.body[0])
    leading_lines = [cst.EmptyLine()] if after_docstring else []
    new_body = list(module.body)
    new_body.insert(insert_idx, cst.SimpleStatementLine(body=[import_item], leading_lines=leading_lines))
    return module.with_changes(body=new_body)


def ensure_from_import(module: cst.Module, module_name: str, name: str, before: Optional[int] = None) -> cst.Module:
    """
    Make `from module_name import name` available exactly once above index `before`.

    An existing from-import of the same module above `before` is extended in
    place; otherwise a new statement joins the leading import block.
    """
    if imports_name(module, module_name, name, before):
        return module

    new_alias = cst.ImportAlias(name=cst.Name(name))
    for idx, stmt, item in _top_level_imports(module, before):
        if not isinstance(item, cst.ImportFrom) or _from_module_name(item) != module_name:
            continue
        if isinstance(item.names, cst.ImportStar):
            continue
        new_item = item.with_changes(names=[*item.names, new_alias])
        new_stmt = stmt.with_changes(body=[new_item if part is item else part for part in stmt.body])
        new_body = list(module.body)
        new_body[idx] = new_stmt
        return module.with_changes(body=new_body)

    return _insert_import(
        module,
        cst.ImportFrom(
            module=dotted_expr(module_name),
            names=[new_alias],
            whitespace_after_import=cst.SimpleWhitespace(" ")
        ),
    )


def ensure_import(module: cst.Module, module_name: str, before: Optional[int] = None) -> cst.Module:
    """Make `import module_name` available exactly once above index `before`."""
    if imports_module(module, module_name, before):
        return module
    return _insert_import(module, cst.Import(names=[cst.ImportAlias(name=dotted_expr(module_name))]))


class ClassTargetTransformer(cst.CSTTransformer):
    """
    Base for transformers that edit one class, found by its dotted class path
    (enclosing class/function names plus its own name).
    """

    def __init__(self, context: dict) -> None:
        super().__init__()
        self.class_path: Optional[str] = context.get("class_path")
        self.applied = False
        self._scope: list[str] = []
        # Imports below this top-level statement are not bound when the class is defined.
        self.anchor: Optional[int] = None

    def visit_Module(self, node: cst.Module) -> bool:
        self.anchor = top_level_index(node, self.class_path)
        return True

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        self._scope.append(node.name.value)
        return True

    def leave_FunctionDef(
        self, original_node: cst.FunctionDef, updated_node: cst.FunctionDef
    ) -> cst.FunctionDef:
        self._scope.pop()
        return updated_node

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:
        self._scope.append(node.name.value)
        return True

    def leave_ClassDef(self, original_node: cst.ClassDef, updated_node: cst.ClassDef) -> cst.ClassDef:
        path = ".".join(self._scope)
        self._scope.pop()
        if path != self.class_path:
            return updated_node
        result = self.edit_class(updated_node)
        if result is not updated_node:
            self.applied = True
        return result

    def edit_class(self, node: cst.ClassDef) -> cst.ClassDef:
        raise NotImplementedError

    @staticmethod
    def prepend_decorator(node: cst.ClassDef, expr: cst.BaseExpression) -> cst.ClassDef:
        return node.with_changes(decorators=[cst.Decorator(decorator=expr), *node.decorators])


class SealClassTransformer(ClassTargetTransformer):
    """Transformer to close a class with @final, importing final when needed."""

    def __init__(self, context: dict) -> None:
        super().__init__(context)
        final_module = context.get("final_module", DEFAULT_FINAL_MODULE)
        self.final_module: str = final_module if final_module in FINAL_MODULES else DEFAULT_FINAL_MODULE
        self._decorator: cst.BaseExpression = cst.Name(FINAL_DECORATOR)
        self._needs_import = True

    def visit_Module(self, node: cst.Module) -> bool:
        """Pick the spelling of @final the module can already resolve."""
        super().visit_Module(node)
        if any(imports_name(node, module_name, FINAL_DECORATOR, self.anchor) for module_name in FINAL_MODULES):
            self._needs_import = False
        elif imports_module(node, "typing", self.anchor):
            self._decorator = dotted_expr(f"typing.{FINAL_DECORATOR}")
            self._needs_import = False
        return True

    def edit_class(self, node: cst.ClassDef) -> cst.ClassDef:
        if FINAL_DECORATOR in decorator_short_names(node):
            logger.debug("%s is already decorated with @final", self.class_path)
            return node
        return self.prepend_decorator(node, self._decorator)

    def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
        if not self.applied or not self._needs_import:
            return updated_node
        return ensure_from_import(updated_node, self.final_module, FINAL_DECORATOR, self.anchor)


class AddMarkerTransformer(ClassTargetTransformer):
    """
    Transformer to open a class with the inheritance marker and import it.

    The bare name is used unless it would be taken by something else in the
    module (a local definition, a foreign import, or an unrelated decorator of
    the same name on the class); then the dotted form is written and the marker
    module itself is imported.
    """

    def __init__(self, context: dict) -> None:
        super().__init__(context)
        self.marker_name: str = context["marker_name"]
        self.marker_namespace: str = context["marker_namespace"]
        self.accepted_names = frozenset({self.marker_name, f"{self.marker_name}Attribute"})
        self.qualified = False
        self._imported: frozenset[str] = frozenset()
        self._name_taken = False

    def visit_Module(self, node: cst.Module) -> bool:
        super().visit_Module(node)
        self._imported = frozenset(
            name for name in self.accepted_names
            if imports_name(node, self.marker_namespace, name, self.anchor)
        )
        self._name_taken = binds_name(node, self.marker_name, self.marker_namespace, self.anchor)
        return True

    def _is_marker(self, full_name: str) -> bool:
        if full_name in self._imported:
            return True
        return any(full_name == f"{self.marker_namespace}.{name}" for name in self.accepted_names)

    def edit_class(self, node: cst.ClassDef) -> cst.ClassDef:
        full_names = [get_full_name_for_node(d.decorator) or "" for d in node.decorators]
        if any(self._is_marker(full_name) for full_name in full_names):
            logger.debug("%s already carries the %s marker", self.class_path, self.marker_name)
            return node
        foreign = any(full_name.split(".")[-1] in self.accepted_names for full_name in full_names)
        if foreign or self._name_taken:
            self.qualified = True
            return self.prepend_decorator(node, dotted_expr(f"{self.marker_namespace}.{self.marker_name}"))
        return self.prepend_decorator(node, cst.Name(self.marker_name))

    def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
        if not self.applied:
            return updated_node
        if self.qualified:
            return ensure_import(updated_node, self.marker_namespace, self.anchor)
        return ensure_from_import(updated_node, self.marker_namespace, self.marker_name, self.anchor)
