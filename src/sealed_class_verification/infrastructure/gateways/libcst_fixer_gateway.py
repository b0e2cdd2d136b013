"""LibCST based Fixer Gateway."""

import logging
from pathlib import Path
from typing import Union

import libcst as cst

from sealed_class_verification.domain.entities import TransformationPlan, TransformationType
from sealed_class_verification.domain.protocols import FixerGatewayProtocol
from sealed_class_verification.infrastructure.gateways.transformers import (
    AddMarkerTransformer,
    SealClassTransformer,
)

logger = logging.getLogger(__name__)


class LibCSTFixerGateway(FixerGatewayProtocol):
    """Gateway for applying safe code modifications using LibCST."""

    def _plan_to_transformer(self, plan: TransformationPlan) -> cst.CSTTransformer:
        """Convert a TransformationPlan to a LibCST transformer."""
        params = plan.params
        t = plan.transformation_type
        if t == TransformationType.SEAL_CLASS:
            return SealClassTransformer(params)
        elif t == TransformationType.ADD_MARKER:
            return AddMarkerTransformer(params)
        else:
            raise ValueError(f"Unknown transformation type: {plan.transformation_type}")

    def apply_to_module(
        self, module: cst.Module, fixes: list[Union[cst.CSTTransformer, TransformationPlan]]
    ) -> cst.Module:
        """
        Apply fixes one after another. Every fix finds its class by path and
        re-reads the imports of the tree it is given, so the order of fixes does
        not matter and an import is never added twice.
        """
        for fix in fixes:
            if fix is None:
                continue
            transformer = self._plan_to_transformer(fix) if isinstance(fix, TransformationPlan) else fix
            module = module.visit(transformer)
        return module

    def apply_to_source(
        self, source: str, fixes: list[Union[cst.CSTTransformer, TransformationPlan]]
    ) -> str:
        """Apply fixes to source text; raises libcst.ParserSyntaxError for invalid source."""
        module = cst.parse_module(source)
        return self.apply_to_module(module, fixes).code

    def apply_fixes(
        self, file_path: str, fixes: list[Union[cst.CSTTransformer, TransformationPlan]]
    ) -> bool:
        """
        Apply a list of fixes to a file.

        Args:
            file_path: Path to the file to modify
            fixes: List of TransformationPlans (or LibCST transformers) to apply

        Returns:
            True if the file was modified, False otherwise
        """
        path = Path(file_path)
        try:
            with path.open(encoding="utf-8") as f:
                source = f.read()
            new_source = self.apply_to_source(source, fixes)
            # Only write if code changed
            if new_source == source:
                return False
            with path.open("w", encoding="utf-8") as f:
                f.write(new_source)
            return True
        except cst.ParserSyntaxError as exc:
            logger.warning("Cannot parse %s: %s", file_path, exc)
            return False
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot rewrite %s: %s", file_path, exc)
            return False
