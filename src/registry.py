import sys

from generations import GenerationError
from models import GenerationSource, ProfileType


class GenerationRegistry:
    """Generations of the System profile and, when present, Home-Manager.

    The System list is mandatory: failing to list it raises GenerationError.
    Home-Manager degrades instead. A failure at load leaves the profile
    absent for the session, a failure on refresh keeps the previous list.
    """

    def __init__(self, system_source, home_manager_source, backend, settings):
        self.backend = backend
        self.settings = settings
        self.sources = {ProfileType.SYSTEM: system_source}
        self.generations = {ProfileType.SYSTEM: []}
        if home_manager_source is not None:
            self.sources[ProfileType.HOME_MANAGER] = home_manager_source

    @classmethod
    def load(cls, system_info, backend, settings):
        system_source = GenerationSource(ProfileType.SYSTEM, system_info.system_profile)
        hm_source = None
        if system_info.home_manager is not None:
            hm_source = GenerationSource(
                ProfileType.HOME_MANAGER, system_info.home_manager.profile_path
            )

        registry = cls(system_source, hm_source, backend, settings)
        registry.generations[ProfileType.SYSTEM] = backend.list_generations(system_source)

        if hm_source is not None:
            try:
                registry.generations[ProfileType.HOME_MANAGER] = backend.list_generations(
                    hm_source
                )
            except (GenerationError, OSError) as e:
                print(f"Home-Manager disabled: {e}", file=sys.stderr)
                del registry.sources[ProfileType.HOME_MANAGER]

        registry.apply_pins()
        return registry

    @property
    def has_home_manager(self):
        return ProfileType.HOME_MANAGER in self.generations

    def generations_for(self, profile):
        return self.generations.get(profile, [])

    def source_for(self, profile):
        return self.sources.get(profile, self.sources[ProfileType.SYSTEM])

    def find(self, profile, generation_id):
        for gen in self.generations_for(profile):
            if gen.id == generation_id:
                return gen
        return None

    def ids(self, profile):
        return {gen.id for gen in self.generations_for(profile)}

    def refresh(self):
        system = self.backend.list_generations(self.sources[ProfileType.SYSTEM])
        self.generations[ProfileType.SYSTEM] = system

        if self.has_home_manager:
            try:
                self.generations[ProfileType.HOME_MANAGER] = self.backend.list_generations(
                    self.sources[ProfileType.HOME_MANAGER]
                )
            except (GenerationError, OSError) as e:
                print(f"Keeping previous Home-Manager generations: {e}", file=sys.stderr)

        self.apply_pins()

    def apply_pins(self):
        for profile, gens in self.generations.items():
            for gen in gens:
                gen.is_pinned = self.settings.is_pinned(profile, gen.id)

    def set_pinned(self, profile, generation_id, pinned):
        gen = self.find(profile, generation_id)
        if gen is not None:
            gen.is_pinned = pinned
