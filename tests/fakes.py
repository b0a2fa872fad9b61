"""Fake services shared by the wirebox test suite."""

import abc

from wirebox import Factory, ServiceProvider
from wirebox.container import Container


class Greeter:
    def __init__(self, text: str | None) -> None:
        self.text = text

    def get_text(self) -> str | None:
        return self.text

    @staticmethod
    def get_text_static(text: str) -> str:
        return text

    @classmethod
    def describe(cls, suffix: str = "") -> str:
        return f"{cls.__name__}{suffix}"

    def set_text(self, text: str) -> None:
        self.text = text


class Storage(abc.ABC):
    @abc.abstractmethod
    def name(self) -> str: ...


class MemoryStorage(Storage):
    def name(self) -> str:
        return "memory"


class DiskStorage(Storage):
    def name(self) -> str:
        return "disk"


class Report:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage


class Archive:
    def __init__(self, storage: Storage, bucket: str = "default") -> None:
        self.storage = storage
        self.bucket = bucket


class Clock:
    pass


class Scheduler:
    def __init__(self, clock: Clock, interval: int = 60) -> None:
        self.clock = clock
        self.interval = interval


class Job:
    def __init__(self, scheduler: Scheduler, name: str) -> None:
        self.scheduler = scheduler
        self.name = name


class GreeterFactory(Factory):
    def __init__(self, clock: Clock) -> None:
        self.clock = clock

    def create(self, foo: str) -> Greeter:
        return Greeter(foo)


class StaticCreateFactory(Factory):
    @staticmethod
    def create() -> Greeter:
        return Greeter("static")


class MissingCreateFactory(Factory):
    pass


class Notifier:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.clock: Clock | None = None
        self.greeter: Greeter | None = None

    def inject_clock(self, clock: Clock) -> None:
        self.calls.append("clock")
        self.clock = clock


class EmailNotifier(Notifier):
    def inject_greeter(self, greeter: Greeter) -> None:
        self.calls.append("greeter")
        self.greeter = greeter

    def inject_clock(self, clock: Clock) -> None:
        self.calls.append("email-clock")
        self.clock = clock


class ChickenService:
    def __init__(self, egg: "EggService") -> None:
        self.egg = egg


class EggService:
    def __init__(self, chicken: ChickenService) -> None:
        self.chicken = chicken


class Farmer:
    pass


class Barn:
    def __init__(self, farmer: "Farmer | None" = None) -> None:
        self.farmer = farmer


class FarmerFactory:
    def __init__(self, barn: Barn) -> None:
        self.barn = barn

    def make(self) -> Farmer:
        return Farmer()


class PositionalOnly:
    def __init__(self, first: str, /, second: str = "b", *, third: str = "c") -> None:
        self.values = (first, second, third)


class VariadicService:
    def __init__(self, *args: int, label: str = "x", **kwargs: int) -> None:
        self.args = args
        self.label = label
        self.kwargs = kwargs


class GreeterProvider(ServiceProvider):
    provides = [Greeter]
    aliases = {"greeter": Greeter}

    def register(self) -> None:
        self.app().define(Greeter).set_param("text", "foo")


class BootableProvider:
    def __init__(self) -> None:
        self.initialized = False
        self.booted = False
        self.booted_deferred = False
        self.boot_container: Container | None = None

    def init(self) -> None:
        self.initialized = True

    def boot(self, container: Container) -> None:
        self.booted = True
        self.boot_container = container

    def boot_deferred(self) -> None:
        self.booted_deferred = True


class InitOnlyProvider:
    def __init__(self) -> None:
        self.initialized = False

    def init(self, clock: Clock) -> None:
        self.initialized = isinstance(clock, Clock)
