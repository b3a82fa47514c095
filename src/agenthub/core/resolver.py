"""ReferenceResolver -- 将 ns/name@selector 解析为 (Artifact, Version)"""

import structlog

from .config import DEFAULT_NAMESPACE
from .errors import NotFoundError
from .models import Artifact, Version
from .reference import Reference, parse_reference
from .store.protocols import ArtifactCatalog, VersionLedger

log = structlog.get_logger()


class ReferenceResolver:
    """引用解析器

    selector 为 "latest" 时读取 latest 指针，否则按字面量精确匹配版本号。
    不做语义化版本范围匹配。
    """

    def __init__(
        self,
        catalog: ArtifactCatalog,
        ledger: VersionLedger,
        default_namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._default_namespace = default_namespace

    @property
    def default_namespace(self) -> str:
        return self._default_namespace

    def parse(self, ref: str) -> Reference:
        return parse_reference(ref, default_namespace=self._default_namespace)

    async def resolve(self, ref: str, caller_id: str | None = None) -> tuple[Artifact, Version]:
        """解析引用

        Raises:
            InvalidArgumentError: 引用语法错误
            NotFoundError: missing="artifact" / "version" / "latest"，附带规范化引用
        """
        reference = self.parse(ref)
        return await self.resolve_reference(reference, caller_id=caller_id)

    async def resolve_reference(
        self,
        reference: Reference,
        caller_id: str | None = None,
    ) -> tuple[Artifact, Version]:
        artifact = await self._catalog.get_artifact(
            reference.namespace,
            reference.name,
            caller_id=caller_id,
        )
        try:
            if reference.is_latest:
                version = await self._ledger.get_latest_version(artifact.artifact_id)
            else:
                version = await self._ledger.get_version(artifact.artifact_id, reference.selector)
        except NotFoundError as e:
            raise NotFoundError(
                f"{reference} not found: {e.message}",
                missing=e.missing,
                reference=str(reference),
            ) from e

        log.debug("reference_resolved", reference=str(reference), version_id=version.version_id)
        return artifact, version
