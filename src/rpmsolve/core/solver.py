"""SAT-based solving engine driven through a ``DependencyProvider``.

Encodes the resolution problem as a Boolean satisfiability (SAT) instance and
uses a CDCL solver (Glucose3 via python-sat) to find a consistent set of
solvables. The encoding follows the OPIUM approach (Tucker et al., ICSE 2007),
built lazily from the root requirements outwards:

- every solvable reached from a root gets a boolean variable;
- every requirement edge ``parent -> requirement`` becomes the clause
  ``~sel OR ~parent OR c1 OR ... OR cn`` over the candidates ``ci`` that
  satisfy it, where ``sel`` is a selector literal assumed true while solving;
- solvables sharing a package name are mutually exclusive.

Selectors make failures explainable: when the assumptions are inconsistent,
the solver's core names the requirement edges involved and is rendered as a
``Problem``.

Preference: after a first model is found, names are decided in discovery
order. A name is left uninstalled when that stays consistent; otherwise its
candidates are tried in provider order and the first consistent one is kept;
the remaining candidates are then excluded wherever that stays consistent.
With the provider sorting newest first, this selects the highest satisfying
version of every needed name and nothing that is not needed.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from pysat.card import CardEnc, EncType
from pysat.solvers import Solver as _PySATSolver

from rpmsolve.core.pool import Pool
from rpmsolve.core.provider import DependencyProvider
from rpmsolve.core.version import satisfies
from rpmsolve.exceptions import UnsolvableError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Problem: the conflict explanation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConflictCause:
    """One requirement edge taking part in a conflict.

    Attributes:
        parent: Solvable that declares the requirement; None for a root.
        requirement: Requirement id.
        candidates: Solvables that satisfy the requirement, preferred first.
        available: Every solvable providing the requirement's name.
    """

    parent: int | None
    requirement: int
    candidates: tuple[int, ...]
    available: tuple[int, ...]

    def describe(self, pool: Pool) -> str:
        requirement = pool.resolve_requirement(self.requirement)
        if self.parent is None:
            head = f"the request requires {requirement}"
        else:
            head = f"{pool.resolve_solvable(self.parent)} requires {requirement}"

        if not self.available:
            return f"{head}, but nothing provides {requirement.name}"
        if not self.candidates:
            names = ", ".join(str(pool.resolve_solvable(s)) for s in self.available)
            return f"{head}, but none of the available candidates match ({names})"
        names = ", ".join(str(pool.resolve_solvable(s)) for s in self.candidates)
        return f"{head}, satisfied only by {names}"


@dataclass
class Problem:
    """Structured explanation of why a set of requirements is unsatisfiable.

    Attributes:
        causes: Requirement edges in the solver's unsatisfiable core, in
            discovery order (roots first).
    """

    causes: list[ConflictCause] = field(default_factory=list)

    def messages(self, pool: Pool) -> list[str]:
        """One human-readable line per conflicting requirement."""
        return [cause.describe(pool) for cause in self.causes]

    def display(self, pool: Pool) -> str:
        """Render the full explanation as multi-line text."""
        lines = ["The following requirements cannot be satisfied together:"]
        lines.extend(f"  - {msg}" for msg in self.messages(pool))
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


class _Encoding:
    """Lazily built CNF over the part of the universe reachable from the roots."""

    def __init__(self, provider: DependencyProvider) -> None:
        self.provider = provider
        self.pool = provider.pool
        self.clauses: list[list[int]] = []
        self.selectors: list[int] = []
        self.causes: dict[int, ConflictCause] = {}
        self.decision_order: list[int] = []
        self._top = 0
        self._vars: dict[int, int] = {}
        self._candidates: dict[int, list[int]] = {}
        self._matching: dict[int, tuple[int, ...]] = {}
        self._queue: deque[int] = deque()

    def _new_var(self) -> int:
        self._top += 1
        return self._top

    def var(self, solvable_id: int) -> int:
        lit = self._vars.get(solvable_id)
        if lit is None:
            lit = self._vars[solvable_id] = self._new_var()
            self._queue.append(solvable_id)
        return lit

    def solvable_for(self) -> dict[int, int]:
        return {lit: solvable for solvable, lit in self._vars.items()}

    def candidates(self, name_id: int) -> list[int]:
        cands = self._candidates.get(name_id)
        if cands is None:
            cands = self._candidates[name_id] = self.provider.candidates(name_id)
            self.decision_order.append(name_id)
        return cands

    def matching(self, requirement_id: int) -> tuple[int, ...]:
        found = self._matching.get(requirement_id)
        if found is None:
            requirement = self.pool.resolve_requirement(requirement_id)
            found = tuple(
                s for s in self.candidates(self.pool.requirement_name(requirement_id))
                if satisfies(requirement, self.pool.resolve_solvable(s))
            )
            self._matching[requirement_id] = found
        return found

    def add_requirement(self, parent: int | None, requirement_id: int) -> None:
        matching = self.matching(requirement_id)
        selector = self._new_var()
        clause = [-selector]
        if parent is not None:
            clause.append(-self.var(parent))
        clause.extend(self.var(s) for s in matching)
        self.clauses.append(clause)
        self.selectors.append(selector)
        self.causes[selector] = ConflictCause(
            parent=parent,
            requirement=requirement_id,
            candidates=matching,
            available=tuple(self.candidates(self.pool.requirement_name(requirement_id))),
        )

    def explore(self) -> None:
        """Expand dependencies of every solvable reached so far, transitively."""
        while self._queue:
            solvable = self._queue.popleft()
            for requirement_id in self.provider.dependencies(solvable).requirements:
                self.add_requirement(solvable, requirement_id)

    def at_most_one(self) -> list[list[int]]:
        """Clauses allowing at most one solvable per package name."""
        by_name: dict[int, list[int]] = {}
        for solvable, lit in self._vars.items():
            by_name.setdefault(self.pool.solvable_name(solvable), []).append(lit)

        clauses: list[list[int]] = []
        for lits in by_name.values():
            if len(lits) < 2:
                continue
            encoding = EncType.pairwise if len(lits) <= 8 else EncType.seqcounter
            cnf = CardEnc.atmost(lits=lits, bound=1, top_id=self._top, encoding=encoding)
            self._top = max(self._top, cnf.nv)
            clauses.extend(cnf.clauses)
        return clauses

    def decision_literals(self, name_id: int) -> list[int]:
        return [self._vars[s] for s in self._candidates[name_id] if s in self._vars]


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------


class Solver:
    """Finds a consistent set of solvables for a list of root requirements.

    Args:
        provider: Source of candidates, candidate order and dependencies.
    """

    def __init__(self, provider: DependencyProvider) -> None:
        self._provider = provider

    @property
    def pool(self) -> Pool:
        return self._provider.pool

    def solve(self, requirements: list[int]) -> list[int]:
        """Solve for the given root requirement ids.

        Args:
            requirements: Interned root requirements.

        Returns:
            Selected solvable ids, in ascending order.

        Raises:
            UnsolvableError: If no assignment satisfies the requirements.
            VersionError: If a version string met during the search cannot
                be compared.
        """
        encoding = _Encoding(self._provider)
        for requirement_id in requirements:
            encoding.add_requirement(None, requirement_id)
        encoding.explore()
        clauses = encoding.clauses + encoding.at_most_one()
        logger.info(
            "Encoded %d solvables, %d requirements, %d clauses",
            len(encoding.solvable_for()), len(encoding.selectors), len(clauses),
        )

        solver = _PySATSolver(name="g3", bootstrap_with=clauses)
        try:
            fixed = list(encoding.selectors)
            if not solver.solve(assumptions=fixed):
                core = set(solver.get_core() or fixed)
                problem = Problem(
                    causes=[encoding.causes[s] for s in encoding.selectors if s in core]
                )
                raise UnsolvableError(problem)

            for name_id in encoding.decision_order:
                lits = encoding.decision_literals(name_id)
                if not lits:
                    continue
                absent = [-lit for lit in lits]
                if solver.solve(assumptions=fixed + absent):
                    fixed.extend(absent)
                    continue
                for lit in lits:
                    if solver.solve(assumptions=fixed + [lit]):
                        fixed.append(lit)
                        break
                # Providers not chosen stay out unless something else needs them.
                for other in lits:
                    if -other in fixed or other in fixed:
                        continue
                    if solver.solve(assumptions=fixed + [-other]):
                        fixed.append(-other)

            solver.solve(assumptions=fixed)
            model = solver.get_model() or []
        finally:
            solver.delete()

        solvable_for = encoding.solvable_for()
        selected = sorted(solvable_for[lit] for lit in model if lit in solvable_for)
        logger.info("Selected %d solvables", len(selected))
        return selected
