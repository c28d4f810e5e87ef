from typing import Protocol, runtime_checkable


@runtime_checkable
class Steppable(Protocol):
    def step(self, delta_t: float) -> None: ...


@runtime_checkable
class Resettable(Protocol):
    def reset(self) -> None: ...
