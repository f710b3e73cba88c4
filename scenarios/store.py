"""Saved mortgage scenarios, persisted as one JSON array under a fixed key."""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from config import settings
from mortgage.calculations import compute_breakdown
from mortgage.models import LoanParameters, SavedScenario

from .storage import JsonFileStore, KeyValueStore, dump_json

logger = logging.getLogger(__name__)


class ScenarioStoreError(RuntimeError):
    """Base error for scenario store operations."""


class ScenarioNameError(ScenarioStoreError, ValueError):
    """Raised when a scenario is saved without a usable name."""


class ScenarioNotFoundError(ScenarioStoreError, KeyError):
    """Raised when a scenario id is not in the store."""


class ScenarioStore:
    def __init__(self, backend: Optional[KeyValueStore] = None, key: Optional[str] = None) -> None:
        self.backend = backend if backend is not None else JsonFileStore()
        self.key = key or settings.SCENARIO_STORE_KEY

    def _read_records(self) -> List[Dict[str, Any]]:
        raw = self.backend.get(self.key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Error loading saved scenarios from '%s': %s", self.key, exc)
            return []
        if not isinstance(records, list):
            logger.warning(
                "Saved scenarios under '%s' are not a list (got %s); ignoring.",
                self.key,
                type(records).__name__,
            )
            return []
        return records

    def _write(self, scenarios: List[SavedScenario]) -> None:
        self.backend.set(self.key, dump_json([s.to_dict() for s in scenarios]))

    def list(self) -> List[SavedScenario]:
        scenarios = []
        for record in self._read_records():
            if not isinstance(record, dict):
                logger.warning("Skipping non-object scenario record: %r", record)
                continue
            try:
                scenarios.append(SavedScenario.from_dict(record))
            except ValueError as exc:
                logger.warning("Skipping malformed scenario record: %s", exc)
        return scenarios

    def get(self, scenario_id: str) -> Optional[SavedScenario]:
        for scenario in self.list():
            if scenario.id == scenario_id:
                return scenario
        return None

    def _new_id(self, existing: List[SavedScenario]) -> str:
        taken = {s.id for s in existing}
        stamp = int(time.time() * 1000)
        while str(stamp) in taken:
            stamp += 1
        return str(stamp)

    def insert(self, parameters: LoanParameters, name: str) -> SavedScenario:
        name = (name or "").strip()
        if not name:
            raise ScenarioNameError("Scenario name cannot be empty.")

        scenarios = self.list()
        scenario = SavedScenario(
            id=self._new_id(scenarios),
            name=name,
            saved_at=datetime.now(timezone.utc).isoformat(),
            parameters=parameters.sanitized(),
        )
        scenarios.append(scenario)
        self._write(scenarios)
        logger.info("Saved scenario '%s' (%s)", scenario.name, scenario.id)
        return scenario

    def delete(self, scenario_id: str) -> None:
        scenarios = self.list()
        remaining = [s for s in scenarios if s.id != scenario_id]
        if len(remaining) == len(scenarios):
            return
        self._write(remaining)
        logger.info("Deleted scenario %s", scenario_id)

    def load(self, scenario_id: str) -> LoanParameters:
        """Fresh parameters for a saved scenario, re-read from storage."""
        scenario = self.get(scenario_id)
        if scenario is None:
            raise ScenarioNotFoundError(scenario_id)
        return LoanParameters.from_dict(scenario.parameters.to_dict())

    def summaries(self) -> List[Dict[str, Any]]:
        rows = []
        for scenario in self.list():
            params = scenario.parameters
            rows.append({
                "id": scenario.id,
                "name": scenario.name,
                "loan_type": params.loan_type.value,
                "rate": params.interest_rate,
                "monthly_payment": compute_breakdown(params).total,
                "saved_at": scenario.saved_at,
            })
        return rows
