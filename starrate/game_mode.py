from enum import IntEnum, unique


@unique
class GameMode(IntEnum):
    """The rulesets with difficulty and performance calculators.

    The values match the mode numbers used in chart files.
    """
    standard = 0
    catch = 2
    mania = 3

    @classmethod
    def parse(cls, name):
        """Look up a game mode by name or number.

        Parameters
        ----------
        name : str or int
            The mode name, like ``'mania'``, or its number.

        Returns
        -------
        mode : GameMode
            The game mode.
        """
        if isinstance(name, int):
            return cls(name)
        try:
            return cls[name.lower()]
        except KeyError:
            raise ValueError(f'unknown game mode: {name!r}')
