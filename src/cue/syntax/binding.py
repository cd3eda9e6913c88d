"""Static name binding for a :class:`SyntaxUnit`.

Resolution follows Python's scoping rules closely enough for counting
references: function scopes see enclosing function scopes and the module,
class bodies are not visible from their methods, ``global`` and ``nonlocal``
redirect a name. ``self.x`` and ``cls.x`` inside a method resolve against
the members of the enclosing class (methods, class attributes and attributes
assigned through ``self``). Anything else (builtins, attributes of arbitrary
objects) stays unresolved and is grouped by identifier.
"""
from __future__ import annotations

import ast
from collections import defaultdict
from typing import Dict, Hashable, Optional, Set

from ..types import NodeKind
from .unit import Node, SyntaxUnit

_SCOPES = (ast.Module, ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda)

class _Scope:
    def __init__(self, node: Node, parent: Optional["_Scope"]) -> None:
        self.node = node
        self.parent = parent
        self.names: Dict[str, Node] = {}
        self.globals: Set[str] = set()
        self.nonlocals: Set[str] = set()

    @property
    def is_class(self) -> bool:
        return isinstance(self.node.tree, ast.ClassDef)

    def define(self, name: str, site: Node) -> None:
        if name in self.globals or name in self.nonlocals:
            return
        self.names.setdefault(name, site)

class Binder:
    def __init__(self, unit: SyntaxUnit) -> None:
        self.unit = unit
        self._scope_of: Dict[int, _Scope] = {}
        self._module: Optional[_Scope] = None
        # class node id -> member name -> declaration site
        self._members: Dict[int, Dict[str, Node]] = defaultdict(dict)
        self._resolved: Dict[int, Optional[Node]] = {}
        self._occurrences: Dict[Hashable, int] = defaultdict(int)
        self._collect(unit.root, None)
        self._count()

    # -- pass 1: declarations ------------------------------------------------

    def _collect(self, node: Node, scope: Optional[_Scope]) -> None:
        t = node.tree
        if isinstance(t, _SCOPES):
            if isinstance(t, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)) and scope is not None:
                scope.define(t.name, node)
                if scope.is_class:
                    self._members[id(scope.node)][t.name] = node
            inner = _Scope(node, scope)
            if self._module is None:
                self._module = inner
            self._scope_of[id(node)] = inner
            if isinstance(t, ast.Lambda):
                for child in node.children:
                    self._collect(child, inner)
                return
            outer = scope or inner
            for child in node.children:
                if isinstance(child.tree, ast.arguments):
                    # parameters bind in the function, their defaults are evaluated outside
                    self._scope_of[id(child)] = inner
                    for sub in child.children:
                        self._collect(sub, inner if isinstance(sub.tree, ast.arg) else outer)
                    continue
                # decorators, bases and return annotations are evaluated in the outer scope
                self._collect(child, inner if self._inside_body(t, child) else outer)
            return

        assert scope is not None
        self._scope_of[id(node)] = scope
        if isinstance(t, ast.Global):
            scope.globals.update(t.names)
        elif isinstance(t, ast.Nonlocal):
            scope.nonlocals.update(t.names)
        elif isinstance(t, ast.Name) and isinstance(t.ctx, (ast.Store, ast.Del)):
            scope.define(t.id, node)
            if scope.is_class:
                self._members[id(scope.node)].setdefault(t.id, node)
        elif isinstance(t, ast.arg):
            scope.define(t.arg, node)
        elif isinstance(t, ast.alias):
            bound = t.asname or t.name.split(".")[0]
            if bound != "*":
                scope.define(bound, node)
        elif isinstance(t, ast.ExceptHandler) and t.name:
            scope.define(t.name, node)
        elif isinstance(t, ast.Attribute) and isinstance(t.ctx, ast.Store):
            owner = self._owner_class_of_self(node, scope)
            if owner is not None:
                self._members[id(owner)].setdefault(t.attr, node)
        for child in node.children:
            self._collect(child, scope)

    @staticmethod
    def _inside_body(t: ast.AST, child: Node) -> bool:
        if child.kind is NodeKind.BLOCK:
            return True
        if isinstance(t, ast.ClassDef):
            return child.tree in t.body
        return isinstance(t, ast.Module)

    def _owner_class_of_self(self, node: Node, scope: _Scope) -> Optional[Node]:
        """The class node when ``node`` is ``self.attr`` or ``cls.attr`` inside one of its methods."""
        t = node.tree
        if not (isinstance(t, ast.Attribute) and isinstance(t.value, ast.Name)):
            return None
        func_scope = scope
        while func_scope is not None and not isinstance(func_scope.node.tree, (ast.FunctionDef, ast.AsyncFunctionDef)):
            func_scope = func_scope.parent
        if func_scope is None or func_scope.parent is None or not func_scope.parent.is_class:
            return None
        args = func_scope.node.tree.args
        positional = args.posonlyargs + args.args
        if not positional or positional[0].arg != t.value.id:
            return None
        return func_scope.parent.node

    # -- pass 2: resolution ----------------------------------------------------

    def _lookup(self, name: str, scope: _Scope) -> Optional[Node]:
        if name in scope.globals:
            return self._module.names.get(name) if self._module else None
        if name in scope.names:
            return scope.names[name]
        cur = scope.parent
        if name in scope.nonlocals:
            while cur is not None and cur.is_class:
                cur = cur.parent
        while cur is not None:
            # class bodies are invisible from nested scopes
            if not cur.is_class and name in cur.names:
                return cur.names[name]
            cur = cur.parent
        return None

    def resolve(self, node: Node) -> Optional[Node]:
        key = id(node)
        if key in self._resolved:
            return self._resolved[key]
        site: Optional[Node] = None
        t = node.tree
        scope = self._scope_of.get(key)
        if isinstance(t, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            site = node
        elif isinstance(t, ast.Call):
            func = self.unit.node_of(t.func)
            site = self.resolve(func) if func is not None else None
        elif isinstance(t, ast.Name) and scope is not None:
            site = self._lookup(t.id, scope)
        elif isinstance(t, ast.Attribute) and scope is not None:
            owner = self._owner_class_of_self(node, scope)
            if owner is not None:
                site = self._members[id(owner)].get(t.attr)
        self._resolved[key] = site
        return site

    def key_of(self, node: Node) -> Hashable:
        site = self.resolve(node)
        if site is not None:
            return ("site", id(site))
        return ("name", node.name)

    def _count(self) -> None:
        seen_sites: Set[int] = set()
        for node in self.unit.walk():
            if node.kind not in (NodeKind.NAME, NodeKind.ATTRIBUTE):
                continue
            site = self.resolve(node)
            if site is not None:
                self._occurrences[("site", id(site))] += 1
                if site is node:
                    seen_sites.add(id(site))
            else:
                self._occurrences[("name", node.name)] += 1
        # declarations that are not Name/Attribute nodes count as one location
        for key in list(self._occurrences):
            if key[0] == "site" and key[1] not in seen_sites:
                self._occurrences[key] += 1

    def occurrences(self, node: Node) -> int:
        return self._occurrences.get(self.key_of(node), 1)

