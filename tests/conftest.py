"""Shared fixtures: a fake Nix backend, a controllable clock and a ready App."""
import dataclasses
import datetime
from pathlib import Path

import pytest

from app import App
from commands import CommandResult
from detect import HomeManagerInfo, SystemInfo
from generations import GenerationError
from models import Generation, Package, ProfileType
from state import Settings

SYSTEM_PROFILE = Path("/nix/var/nix/profiles/system")
HM_PROFILE = Path("/home/tester/.local/state/home-manager/profiles/home-manager")


def make_generation(gen_id, current=False, pinned=False, **kwargs):
    return Generation(
        id=gen_id,
        date=datetime.datetime(2024, 1, 1, 12, 0) + datetime.timedelta(days=gen_id),
        is_current=current,
        is_pinned=pinned,
        nixos_version=kwargs.pop("nixos_version", "24.11.20240101.abcdef"),
        **kwargs,
    )


def make_packages(*pairs):
    return [Package(name=name, version=version) for name, version in pairs]


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeBackend:
    """Stands in for NixBackend and records every collaborator call."""

    def __init__(self, system, home_manager=None, packages=None):
        self.generations = {
            ProfileType.SYSTEM: system,
            ProfileType.HOME_MANAGER: home_manager,
        }
        # Keyed by generation link name, e.g. "system-7-link"
        self.packages = packages or {}
        self.list_errors = {}
        self.command_success = True
        self.command_error = None
        self.calls = []

    def list_generations(self, source):
        self.calls.append(("list", source.profile_type))
        error = self.list_errors.get(source.profile_type)
        if error is not None:
            raise error
        gens = self.generations[source.profile_type]
        if gens is None:
            raise GenerationError("profile not found")
        return [dataclasses.replace(g) for g in gens]

    def get_packages(self, gen_path):
        self.calls.append(("packages", Path(gen_path).name))
        return list(self.packages.get(Path(gen_path).name, []))

    def build_restore_command(self, profile_path, generation_id, profile):
        return f"restore {profile.value} {generation_id} {profile_path}"

    def build_delete_command(self, profile_path, generation_ids, profile):
        ids = " ".join(str(i) for i in generation_ids)
        return f"delete {profile.value} {ids} {profile_path}"

    def restore_generation(self, profile_path, generation_id, profile, dry_run, command=None):
        self.calls.append(("restore", profile, generation_id, dry_run, command))
        if self.command_error is not None:
            raise self.command_error
        if dry_run:
            return CommandResult(True, f"Dry run: Would execute restore to generation {generation_id}", command)
        if not self.command_success:
            return CommandResult(False, "Failed to restore: boom", command)
        for gen in self.generations[profile]:
            gen.is_current = gen.id == generation_id
        return CommandResult(True, f"Successfully restore generation {generation_id}", command)

    def delete_generations(self, profile_path, generation_ids, profile, dry_run, command=None):
        self.calls.append(("delete", profile, tuple(generation_ids), dry_run, command))
        if self.command_error is not None:
            raise self.command_error
        if dry_run:
            return CommandResult(True, f"Dry run: Would delete {len(generation_ids)} generation(s)", command)
        if not self.command_success:
            return CommandResult(False, "Failed to delete: boom", command)
        self.generations[profile] = [
            g for g in self.generations[profile] if g.id not in generation_ids
        ]
        return CommandResult(True, f"Successfully delete {len(generation_ids)} generation(s)", command)

    def executed(self):
        return [c for c in self.calls if c[0] in ("restore", "delete")]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(tmp_path):
    return Settings(config_file=str(tmp_path / "nixhist" / "settings.json"))


@pytest.fixture
def system_info():
    return SystemInfo(
        hostname="nixos",
        username="tester",
        uses_flakes=True,
        system_profile=SYSTEM_PROFILE,
        home_manager=HomeManagerInfo(HM_PROFILE, is_standalone=True),
    )


@pytest.fixture
def backend():
    system = [
        make_generation(10, current=True),
        make_generation(9),
        make_generation(8),
        make_generation(7),
    ]
    home_manager = [
        make_generation(3, current=True),
        make_generation(2),
        make_generation(1),
    ]
    packages = {
        "system-10-link": make_packages(("foo", "1.1"), ("baz", "1.0"), ("linux", "6.6.52")),
        "system-9-link": make_packages(("foo", "1.0"), ("bar", "2.0"), ("linux", "6.6.50")),
        "system-8-link": make_packages(("firefox", "122.0"), ("Fish", "3.7"), ("git", "2.43")),
    }
    return FakeBackend(system, home_manager, packages)


@pytest.fixture
def make_app(system_info, settings, backend, clock):
    def factory(dry_run=False):
        return App(system_info, settings, backend=backend, dry_run=dry_run, clock=clock)

    return factory


@pytest.fixture
def app(make_app):
    return make_app()


def press(app, *keys):
    for key in keys:
        app.handle_key(key)
