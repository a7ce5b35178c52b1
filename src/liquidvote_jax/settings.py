"""Vote settings: voters, policies and per-voter delegation weights.

A setting is the JSON-shaped configuration consumed by the delegation
model::

    {
        "title": "Budget 2026",
        "voters": ["alice", "bob"],
        "policies": ["parks", {"name": "roads", "description": "Fix roads"}],
        "votes": {
            "alice": {"bob": 0.5, "parks": 0.5},
            "bob": {"roads": 1.0}
        }
    }

Policies are either a bare name or a name with a description; matching is
always done on the name.
"""

import copy
import json
from typing import NamedTuple, Optional


class Policy(NamedTuple):
    name: str
    description: Optional[str] = None

    @classmethod
    def coerce(cls, value):
        """Build a Policy from a Policy, a name, a {"name", "description"}
        mapping or a [name, description] pair."""
        if isinstance(value, Policy):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, dict):
            if "name" not in value:
                raise ValueError(f"policy mapping without 'name': {value!r}")
            return cls(str(value["name"]), value.get("description"))
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls(str(value[0]), value[1])
        raise ValueError(f"cannot interpret policy {value!r}")

    def matches(self, key):
        return key == self.name or (
            self.description is not None and key == self.description
        )

    def to_json(self):
        if self.description is None:
            return self.name
        return {"name": self.name, "description": self.description}


class Setting:
    def __init__(self, *, voters, policies, votes, title=None):
        """initializes a Setting from an ordered list of voter names,
        an ordered list of policies (anything Policy.coerce accepts),
        and the vote table mapping voter -> {target -> weight}"""
        if isinstance(voters, str) or not isinstance(voters, (list, tuple)):
            raise ValueError("'voters' must be a list of names")
        if isinstance(policies, str) or not isinstance(policies, (list, tuple)):
            raise ValueError("'policies' must be a list")
        if not isinstance(votes, dict):
            raise ValueError("'votes' must be a mapping of voter to weights")
        self.title = title
        self.voters = [str(v) for v in voters]
        self.policies = [Policy.coerce(p) for p in policies]
        self.votes = {}
        for voter, weights in votes.items():
            self.votes[str(voter)] = _coerce_weights(voter, weights)

    @property
    def voter_names(self):
        return list(self.voters)

    @property
    def policy_names(self):
        return [p.name for p in self.policies]

    def add_voter(self, name, votes=None):
        name = str(name)
        self.voters.append(name)
        self.votes[name] = _coerce_weights(name, votes or {})

    def remove_voter(self, name):
        """Remove a voter and its vote table. Entries of other voters that
        target it are kept and become unresolved targets."""
        name = str(name)
        if name not in self.voters:
            raise ValueError(f"unknown voter {name!r}")
        self.voters.remove(name)
        self.votes.pop(name, None)

    def add_policy(self, name, description=None):
        self.policies.append(Policy(str(name), description))

    def remove_policy(self, key):
        """Remove every policy whose name or description equals key."""
        kept = [p for p in self.policies if not p.matches(key)]
        if len(kept) == len(self.policies):
            raise ValueError(f"no policy matches {key!r}")
        self.policies = kept

    def set_vote(self, voter, target, weight):
        voter, target = str(voter), str(target)
        self.votes.setdefault(voter, {})[target] = _coerce_weight(
            voter, target, weight
        )

    def snapshot(self):
        """returns an independent deep copy of this setting"""
        return copy.deepcopy(self)

    def to_dict(self):
        return {
            "title": self.title,
            "voters": list(self.voters),
            "policies": [p.to_json() for p in self.policies],
            "votes": {v: dict(w) for v, w in self.votes.items()},
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError("setting must be a JSON object")
        missing = [k for k in ("voters", "policies", "votes") if k not in data]
        if missing:
            raise ValueError(f"setting is missing key(s): {', '.join(missing)}")
        return cls(
            voters=data["voters"],
            policies=data["policies"],
            votes=data["votes"],
            title=data.get("title"),
        )

    def __repr__(self):
        return (f"Setting(title={self.title!r}, voters={len(self.voters)}, "
                f"policies={len(self.policies)})")


def _coerce_weight(voter, target, weight):
    if isinstance(weight, bool):
        raise ValueError(f"weight {voter!r} -> {target!r} must be a number")
    try:
        return float(weight)
    except (TypeError, ValueError):
        raise ValueError(
            f"weight {voter!r} -> {target!r} must be a number, got {weight!r}"
        ) from None


def _coerce_weights(voter, weights):
    if not isinstance(weights, dict):
        raise ValueError(f"votes of {voter!r} must be a mapping of target to weight")
    return {str(t): _coerce_weight(voter, t, w) for t, w in weights.items()}


def load_setting(path):
    """reads a Setting from a UTF-8 JSON file"""
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as err:
            raise ValueError(f"{path}: invalid JSON ({err})") from err
    return Setting.from_dict(data)


def save_setting(setting, path, *, indent=2):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(setting.to_dict(), f, indent=indent, ensure_ascii=False)
        f.write("\n")
