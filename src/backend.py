import commands
import generations
import packages


class NixBackend:
    """The external collaborators the dashboard talks to.

    Each attribute can be swapped for a stand-in with the same signature.
    """

    def __init__(
        self,
        list_generations=generations.list_generations,
        get_packages=packages.get_packages,
        restore_generation=commands.restore_generation,
        delete_generations=commands.delete_generations,
        build_restore_command=commands.build_restore_command,
        build_delete_command=commands.build_delete_command,
    ):
        self.list_generations = list_generations
        self.get_packages = get_packages
        self.restore_generation = restore_generation
        self.delete_generations = delete_generations
        self.build_restore_command = build_restore_command
        self.build_delete_command = build_delete_command
