"""
Contrato do objeto ControlPlane.

Objetos de ControlPlane pertencem a provedores externos e chegam como
`Unstructured`. Este módulo expõe acessores tipados apenas para os caminhos
que o compilador lê ou escreve:

    - spec.machineTemplate.infrastructureRef
    - spec.machineTemplate.metadata
    - spec.replicas
    - spec.version

Uso:
    control_plane().machine_template().infrastructure_ref().get(obj)
    control_plane().replicas().set(obj, 3)

Todo get/set pode falhar com `FieldAccessError` quando o schema do objeto
não expõe o caminho; a mensagem sempre nomeia o caminho.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from topology_compiler.core.exceptions import FieldAccessError
from topology_compiler.core.model.objects import ObjectMeta, Unstructured
from topology_compiler.core.model.references import ObjectReference

from .paths import get_nested, path_to_str, set_nested
from .references import obj_to_ref


def _not_found(obj: Unstructured, path: Tuple[str, ...]) -> FieldAccessError:
    return FieldAccessError(
        message=f"{path_to_str(path)} not found",
        details={"path": path_to_str(path), "object_kind": obj.kind},
    )


def _wrong_type(obj: Unstructured, path: Tuple[str, ...], expected: str, value: Any) -> FieldAccessError:
    return FieldAccessError(
        message=f"{path_to_str(path)} is of type {type(value).__name__}, expected {expected}",
        details={"path": path_to_str(path), "object_kind": obj.kind},
    )


@dataclass(frozen=True)
class Ref:
    """Acessor de um campo do tipo referência."""

    path: Tuple[str, ...]

    def get(self, obj: Unstructured) -> ObjectReference:
        value, found = get_nested(obj, self.path)
        if not found:
            raise _not_found(obj, self.path)
        if not isinstance(value, dict):
            raise _wrong_type(obj, self.path, "map", value)
        return ObjectReference.from_dict(value) or ObjectReference()

    def set(self, obj: Unstructured, ref_obj: Any) -> None:
        set_nested(obj, obj_to_ref(ref_obj).to_dict(), self.path)


@dataclass(frozen=True)
class Int64:
    path: Tuple[str, ...]

    def get(self, obj: Unstructured) -> int:
        value, found = get_nested(obj, self.path)
        if not found:
            raise _not_found(obj, self.path)
        if isinstance(value, bool) or not isinstance(value, int):
            raise _wrong_type(obj, self.path, "int", value)
        return value

    def set(self, obj: Unstructured, value: int) -> None:
        set_nested(obj, int(value), self.path)


@dataclass(frozen=True)
class String:
    path: Tuple[str, ...]

    def get(self, obj: Unstructured) -> str:
        value, found = get_nested(obj, self.path)
        if not found:
            raise _not_found(obj, self.path)
        if not isinstance(value, str):
            raise _wrong_type(obj, self.path, "string", value)
        return value

    def set(self, obj: Unstructured, value: str) -> None:
        set_nested(obj, value, self.path)


@dataclass(frozen=True)
class Metadata:
    """Acessor de um bloco `{labels, annotations}`."""

    path: Tuple[str, ...]

    def get(self, obj: Unstructured) -> ObjectMeta:
        value, found = get_nested(obj, self.path)
        if not found:
            raise _not_found(obj, self.path)
        if not isinstance(value, dict):
            raise _wrong_type(obj, self.path, "map", value)
        return ObjectMeta.from_dict(value)

    def set(self, obj: Unstructured, metadata: ObjectMeta) -> None:
        set_nested(obj, metadata.to_dict(), self.path)


class ControlPlaneMachineTemplateContract:
    """Caminhos sob `spec.machineTemplate`."""

    def infrastructure_ref(self) -> Ref:
        return Ref(("spec", "machineTemplate", "infrastructureRef"))

    def metadata(self) -> Metadata:
        return Metadata(("spec", "machineTemplate", "metadata"))


class ControlPlaneContract:
    def machine_template(self) -> ControlPlaneMachineTemplateContract:
        return ControlPlaneMachineTemplateContract()

    def replicas(self) -> Int64:
        return Int64(("spec", "replicas"))

    def version(self) -> String:
        return String(("spec", "version"))


_CONTROL_PLANE = ControlPlaneContract()


def control_plane() -> ControlPlaneContract:
    return _CONTROL_PLANE
