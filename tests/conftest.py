"""Shared fixtures: a byte-level class file builder and a sample class."""

from __future__ import annotations

import struct
from typing import Optional

import pytest

from shared.config import ClassyConfig
from shared.logger import ClassyLogger


TAG_UTF8 = 1
TAG_INTEGER = 3
TAG_FLOAT = 4
TAG_LONG = 5
TAG_DOUBLE = 6
TAG_CLASS = 7
TAG_STRING = 8
TAG_FIELDREF = 9
TAG_METHODREF = 10
TAG_INTERFACE_METHODREF = 11
TAG_NAME_AND_TYPE = 12
TAG_METHOD_HANDLE = 15
TAG_METHOD_TYPE = 16
TAG_INVOKE_DYNAMIC = 18


class ClassFileBuilder:
    """Assemble class file bytes entry by entry.

    Every ``add``-style method returns the constant pool index it
    allocated, so fixtures can refer to entries symbolically.
    """

    def __init__(self, *, magic: int = 0xCAFEBABE, minor: int = 0, major: int = 52) -> None:
        self.magic = magic
        self.minor = minor
        self.major = major
        self.access_flags = 0x0021  # public, super
        self.this_class = 0
        self.super_class = 0
        self.interfaces: list[int] = []
        self._pool: list[bytes] = []
        self._next_index = 1
        self._utf8_cache: dict[bytes, int] = {}
        self._fields: list[bytes] = []
        self._methods: list[bytes] = []
        self._attributes: list[bytes] = []

    # -- constant pool ------------------------------------------------------

    @property
    def pool_count(self) -> int:
        """``constant_pool_count`` as it will be written."""
        return self._next_index

    def raw_entry(self, tag: int, payload: bytes = b"", *, slots: int = 1) -> int:
        index = self._next_index
        self._pool.append(bytes([tag]) + payload)
        self._next_index += slots
        return index

    def utf8_raw(self, raw: bytes) -> int:
        if raw not in self._utf8_cache:
            self._utf8_cache[raw] = self.raw_entry(
                TAG_UTF8, struct.pack(">H", len(raw)) + raw
            )
        return self._utf8_cache[raw]

    def utf8(self, text: str) -> int:
        return self.utf8_raw(text.encode("utf-8"))

    def integer(self, value: int) -> int:
        return self.raw_entry(TAG_INTEGER, struct.pack(">i", value))

    def float_(self, value: float) -> int:
        return self.raw_entry(TAG_FLOAT, struct.pack(">f", value))

    def long(self, value: int) -> int:
        return self.raw_entry(TAG_LONG, struct.pack(">q", value), slots=2)

    def double(self, value: float) -> int:
        return self.raw_entry(TAG_DOUBLE, struct.pack(">d", value), slots=2)

    def class_(self, binary_name: str) -> int:
        return self.raw_entry(TAG_CLASS, struct.pack(">H", self.utf8(binary_name)))

    def string(self, text: str) -> int:
        return self.raw_entry(TAG_STRING, struct.pack(">H", self.utf8(text)))

    def name_and_type(self, name: str, descriptor: str) -> int:
        return self.raw_entry(
            TAG_NAME_AND_TYPE,
            struct.pack(">HH", self.utf8(name), self.utf8(descriptor)),
        )

    def _member_ref(self, tag: int, owner: str, name: str, descriptor: str) -> int:
        class_index = self.class_(owner)
        nat_index = self.name_and_type(name, descriptor)
        return self.raw_entry(tag, struct.pack(">HH", class_index, nat_index))

    def field_ref(self, owner: str, name: str, descriptor: str) -> int:
        return self._member_ref(TAG_FIELDREF, owner, name, descriptor)

    def method_ref(self, owner: str, name: str, descriptor: str) -> int:
        return self._member_ref(TAG_METHODREF, owner, name, descriptor)

    def interface_method_ref(self, owner: str, name: str, descriptor: str) -> int:
        return self._member_ref(TAG_INTERFACE_METHODREF, owner, name, descriptor)

    def method_handle(self, reference_kind: int, reference_index: int) -> int:
        return self.raw_entry(
            TAG_METHOD_HANDLE, struct.pack(">BH", reference_kind, reference_index)
        )

    def method_type(self, descriptor: str) -> int:
        return self.raw_entry(TAG_METHOD_TYPE, struct.pack(">H", self.utf8(descriptor)))

    def invoke_dynamic(self, bootstrap_index: int, name: str, descriptor: str) -> int:
        nat_index = self.name_and_type(name, descriptor)
        return self.raw_entry(
            TAG_INVOKE_DYNAMIC, struct.pack(">HH", bootstrap_index, nat_index)
        )

    # -- class structure ----------------------------------------------------

    def _attribute_bytes(self, name: str, data: bytes) -> bytes:
        return struct.pack(">HI", self.utf8(name), len(data)) + data

    def _member_bytes(
        self,
        flags: int,
        name: str,
        descriptor: str,
        attributes: Optional[list[tuple[str, bytes]]],
    ) -> bytes:
        attributes = attributes or []
        out = struct.pack(
            ">HHHH", flags, self.utf8(name), self.utf8(descriptor), len(attributes)
        )
        for attr_name, data in attributes:
            out += self._attribute_bytes(attr_name, data)
        return out

    def add_field(self, flags: int, name: str, descriptor: str, attributes=None) -> None:
        self._fields.append(self._member_bytes(flags, name, descriptor, attributes))

    def add_method(self, flags: int, name: str, descriptor: str, attributes=None) -> None:
        self._methods.append(self._member_bytes(flags, name, descriptor, attributes))

    def add_attribute(self, name: str, data: bytes) -> None:
        self._attributes.append(self._attribute_bytes(name, data))

    def build(self, *, trailing: bytes = b"") -> bytes:
        out = struct.pack(">IHHH", self.magic, self.minor, self.major, self.pool_count)
        out += b"".join(self._pool)
        out += struct.pack(">HHH", self.access_flags, self.this_class, self.super_class)
        out += struct.pack(">H", len(self.interfaces))
        out += b"".join(struct.pack(">H", index) for index in self.interfaces)
        for table in (self._fields, self._methods, self._attributes):
            out += struct.pack(">H", len(table)) + b"".join(table)
        return out + trailing


def build_greeter(builder: ClassFileBuilder) -> ClassFileBuilder:
    """Populate *builder* with a small but complete class.

    Roughly::

        public final class com.example.Greeter implements java.lang.Runnable {
            private static final int COUNT = 42;
            protected java.lang.String[] names;
            public Greeter();
            public static void main(java.lang.String[]);
            public final boolean check(int, float, java.lang.Object);
        }
    """
    builder.access_flags = 0x0031  # public final super
    builder.this_class = builder.class_("com/example/Greeter")
    builder.super_class = builder.class_("java/lang/Object")
    builder.interfaces = [builder.class_("java/lang/Runnable")]

    count_value = builder.integer(42)
    builder.long(1234567890123)
    builder.double(3.5)
    builder.float_(1.5)
    builder.string("Hello, world")
    init_ref = builder.method_ref("java/lang/Object", "<init>", "()V")
    builder.field_ref("com/example/Greeter", "names", "[Ljava/lang/String;")
    builder.interface_method_ref("java/lang/Runnable", "run", "()V")
    handle = builder.method_handle(6, init_ref)
    builder.method_type("(I)V")
    builder.invoke_dynamic(0, "apply", "()Ljava/lang/Runnable;")
    assert handle > 0

    builder.add_field(
        0x001A, "COUNT", "I", [("ConstantValue", struct.pack(">H", count_value))]
    )
    builder.add_field(0x0004, "names", "[Ljava/lang/String;")

    code = bytes([0x2A, 0xB7]) + struct.pack(">H", init_ref) + bytes([0xB1])
    builder.add_method(0x0001, "<init>", "()V", [("Code", code)])
    builder.add_method(0x0009, "main", "([Ljava/lang/String;)V", [("Code", b"\xb1")])
    builder.add_method(0x0011, "check", "(IFLjava/lang/Object;)Z")

    builder.add_attribute("SourceFile", struct.pack(">H", builder.utf8("Greeter.java")))
    return builder


@pytest.fixture
def builder() -> ClassFileBuilder:
    return ClassFileBuilder()


@pytest.fixture
def greeter_builder() -> ClassFileBuilder:
    return build_greeter(ClassFileBuilder())


@pytest.fixture
def greeter_bytes(greeter_builder: ClassFileBuilder) -> bytes:
    return greeter_builder.build()


@pytest.fixture
def greeter_path(tmp_path, greeter_bytes):
    path = tmp_path / "Greeter.class"
    path.write_bytes(greeter_bytes)
    return path


@pytest.fixture
def quiet_logger() -> ClassyLogger:
    return ClassyLogger("test", log_level="DEBUG", console_output=False)


@pytest.fixture
def config() -> ClassyConfig:
    return ClassyConfig()
