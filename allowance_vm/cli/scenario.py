"""
allowance_vm.cli.scenario — load and replay JSON scenario files.

A scenario names some accounts, deploys a token and a vault, and replays a
list of timed steps against them, comparing each outcome to an expectation.

    {
      "accounts": ["grantor", "alice"],
      "grantor": "grantor",
      "token": {"name": "Allowance Coin", "symbol": "ALW", "decimals": 18,
                "supply": 1000000, "balances": {"alice": 0}},
      "vault": {"window_duration": 86400},
      "steps": [
        {"at": 0,  "sender": "grantor", "call": "token.approve", "args": ["@vault", 1000]},
        {"at": 0,  "sender": "grantor", "call": "fund", "args": [1000]},
        {"at": 0,  "sender": "grantor", "call": "configure", "args": ["@alice", 100]},
        {"at": 10, "sender": "alice", "call": "claim", "args": [60], "returns": 60},
        {"at": 20, "sender": "alice", "call": "claim", "args": [50],
         "expect": "ALLOWANCE:EXCEEDS_ALLOWANCE"},
        {"at": 20, "view": true, "call": "remaining_quota", "args": ["@alice"], "returns": 40}
      ]
    }

Argument strings of the form ``@name`` resolve to an account or to
``@vault``/``@token``; ``0x``-prefixed strings decode to bytes. A ``call``
prefixed with ``token.`` targets the token, anything else the vault.
``expect`` is ``"ok"`` (default) or an error code.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import VMConfig
from ..runtime.context import ContextError, to_bytes, to_hex
from ..runtime.engine import Engine, to_jsonable
from ..runtime.error import VmError
from ..runtime.hash_api import sha3_256

log = logging.getLogger(__name__)

DEFAULT_TOKEN_MODULE = "allowance_contracts.stdlib.token.fungible"
DEFAULT_VAULT_MODULE = "allowance_contracts.allowance.contract"


class ScenarioError(Exception):
    """Malformed scenario file (as opposed to a step that did not match)."""


@dataclass
class StepResult:
    index: int
    at: int
    sender: str
    call: str
    expect: str
    outcome: str
    return_value: Any = None
    expected_return: Any = None
    error: Optional[Dict[str, Any]] = None
    matched: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "at": self.at,
            "sender": self.sender,
            "call": self.call,
            "expect": self.expect,
            "outcome": self.outcome,
            "return": to_jsonable(self.return_value),
            "error": self.error,
            "matched": self.matched,
        }


@dataclass
class ScenarioReport:
    accounts: Dict[str, bytes]
    token: bytes
    vault: bytes
    steps: List[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(s.matched for s in self.steps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "accounts": {k: to_hex(v) for k, v in self.accounts.items()},
            "token": to_hex(self.token),
            "vault": to_hex(self.vault),
            "steps": [s.to_dict() for s in self.steps],
        }


def account_address(name: str, address_len: int) -> bytes:
    """Deterministic account address for a scenario name."""
    return sha3_256(b"allowance-vm/account|" + name.encode("utf-8"))[:address_len]


def load_scenario(path: Union[str, Path]) -> Dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ScenarioError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ScenarioError(f"{path}: top-level value must be an object")
    for key in ("accounts", "steps"):
        if key not in data:
            raise ScenarioError(f"{path}: missing {key!r}")
    return data


def _int(value: Any, where: str) -> int:
    if isinstance(value, bool):
        raise ScenarioError(f"{where}: expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ScenarioError(f"{where}: expected an integer, got {value!r}") from e


def _text(value: Any, where: str) -> bytes:
    if not isinstance(value, str):
        raise ScenarioError(f"{where}: expected a string, got {value!r}")
    return value.encode("utf-8")


class _Runner:
    def __init__(self, data: Dict[str, Any], config: Optional[VMConfig]) -> None:
        self.data = data
        self.engine = Engine(config=config)
        alen = self.engine.config.address_len
        self.accounts: Dict[str, bytes] = {n: account_address(n, alen) for n in data["accounts"]}
        self.names: Dict[str, bytes] = dict(self.accounts)

    def _resolve(self, value: Any) -> Any:
        if isinstance(value, str):
            if value.startswith("@"):
                name = value[1:]
                if name not in self.names:
                    raise ScenarioError(f"unknown name {value!r}")
                return self.names[name]
            if value.startswith(("0x", "0X")):
                try:
                    return to_bytes(value)
                except ContextError as e:
                    raise ScenarioError(str(e)) from e
            return value.encode("utf-8")
        if isinstance(value, list):
            return [self._resolve(v) for v in value]
        return value

    def _account(self, name: str) -> bytes:
        if name not in self.accounts:
            raise ScenarioError(f"unknown account {name!r}")
        return self.accounts[name]

    def setup(self) -> None:
        grantor = self._account(self.data.get("grantor", "grantor"))
        tok = self.data.get("token", {})
        self.token = self.engine.deploy(
            tok.get("module", DEFAULT_TOKEN_MODULE),
            _text(tok.get("name", "Allowance Coin"), "token.name"),
            _text(tok.get("symbol", "ALW"), "token.symbol"),
            _int(tok.get("decimals", 18), "token.decimals"),
            _int(tok.get("supply", 0), "token.supply"),
            sender=grantor,
        )
        self.names["token"] = self.token
        for holder, amount in tok.get("balances", {}).items():
            amount = _int(amount, f"token.balances.{holder}")
            self.engine.call(self.token, "transfer", self._account(holder), amount, sender=grantor)

        vault = self.data.get("vault", {})
        self.vault = self.engine.deploy(
            vault.get("module", DEFAULT_VAULT_MODULE),
            self.token,
            _int(vault.get("window_duration", 86_400), "vault.window_duration"),
            sender=grantor,
        )
        self.names["vault"] = self.vault

    def step(self, index: int, raw: Dict[str, Any]) -> StepResult:
        if "call" not in raw:
            raise ScenarioError(f"step {index}: missing 'call'")
        at = raw.get("at")
        if at is not None:
            try:
                self.engine.set_time(_int(at, f"step {index}.at"))
            except ContextError as e:
                raise ScenarioError(f"step {index}: {e}") from e

        call = str(raw["call"])
        target, fn = (self.token, call[len("token."):]) if call.startswith("token.") else (self.vault, call)
        sender_name = raw.get("sender")
        sender = self._account(sender_name) if sender_name is not None else None
        args = self._resolve(list(raw.get("args", [])))
        expect = str(raw.get("expect", "ok"))

        result = StepResult(
            index=index,
            at=self.engine.block.timestamp,
            sender=sender_name or "-",
            call=call,
            expect=expect,
            outcome="ok",
            expected_return=raw.get("returns"),
        )
        try:
            if raw.get("view"):
                result.return_value = self.engine.view(target, fn, *args, sender=sender)
            else:
                if sender is None:
                    raise ScenarioError(f"step {index}: state-changing call needs a 'sender'")
                result.return_value = self.engine.call(target, fn, *args, sender=sender)
        except VmError as exc:
            result.outcome = exc.code
            result.error = exc.to_dict()
        except ScenarioError:
            raise
        except Exception as exc:
            log.exception("step %d (%s) raised a non-VM error", index, call)
            result.outcome = "python_error"
            result.error = {"code": "python_error", "message": repr(exc), "context": {}}

        result.matched = result.outcome == expect
        if result.matched and "returns" in raw:
            result.matched = to_jsonable(result.return_value) == raw["returns"]
        log.debug("step %d %s -> %s (matched=%s)", index, call, result.outcome, result.matched)
        return result


def run_scenario(data: Dict[str, Any], config: Optional[VMConfig] = None) -> ScenarioReport:
    """Deploy the scenario's contracts and replay every step."""
    runner = _Runner(data, config)
    runner.setup()
    report = ScenarioReport(accounts=runner.accounts, token=runner.token, vault=runner.vault)
    for i, raw in enumerate(data["steps"]):
        if not isinstance(raw, dict):
            raise ScenarioError(f"step {i}: must be an object")
        report.steps.append(runner.step(i, raw))
    return report


__all__ = [
    "ScenarioError",
    "StepResult",
    "ScenarioReport",
    "account_address",
    "load_scenario",
    "run_scenario",
]
