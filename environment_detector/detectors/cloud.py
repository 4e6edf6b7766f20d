"""Cloud and serverless platform detection"""
import importlib
from typing import Optional

from ..core.constants import AWS_ECS_ENV_VARS, AWS_RUNTIME_ENV_VARS, CLOUD_ENV_VARS, EC2_HYPERVISOR_UUID
from ..core.detector import BaseDetector
from ..logging_config import get_logger
from ..models import CloudInfo, CloudProvider
from ..utils.file import file_exists
from ..utils.process import get_env, get_platform, has_env

logger = get_logger(__name__)

# Vercel and Netlify are only serverless inside a function or dev runtime
_FUNCTION_ENV_VARS = ["VERCEL_FUNCTION", "NETLIFY_FUNCTION_NAME", "NETLIFY_DEV"]

_ALWAYS_SERVERLESS = {
    CloudProvider.AWS_LAMBDA,
    CloudProvider.GOOGLE_CLOUD_FUNCTIONS,
    CloudProvider.AZURE_FUNCTIONS,
    CloudProvider.CLOUDFLARE_WORKERS,
}


def _first_env(*keys: str) -> Optional[str]:
    """Value of the first key that is set to a non-empty string"""
    for key in keys:
        value = get_env(key)
        if value:
            return value
    return None


class CloudDetector(BaseDetector[CloudInfo]):
    """Detect cloud providers, serverless runtimes, function name and region"""

    name = "cloud"

    def _perform_detection(self) -> CloudInfo:
        provider = self._detect_provider()
        return CloudInfo(
            is_cloud=provider is not None,
            provider=provider,
            is_serverless=self._is_serverless(provider),
            function_name=self._get_function_name(provider),
            region=self._get_region(provider),
        )

    def _detect_provider(self) -> Optional[CloudProvider]:
        if has_env(CLOUD_ENV_VARS["AWS_LAMBDA_FUNCTION_NAME"]) or has_env(CLOUD_ENV_VARS["AWS_EXECUTION_ENV"]):
            return CloudProvider.AWS_LAMBDA

        # Cloud Functions and Cloud Run
        if has_env(CLOUD_ENV_VARS["FUNCTION_NAME"]) or has_env(CLOUD_ENV_VARS["K_SERVICE"]):
            return CloudProvider.GOOGLE_CLOUD_FUNCTIONS

        # App Service sets WEBSITE_SITE_NAME too; only the Functions host sets the extension version
        if has_env(CLOUD_ENV_VARS["WEBSITE_SITE_NAME"]) and has_env("FUNCTIONS_EXTENSION_VERSION"):
            return CloudProvider.AZURE_FUNCTIONS

        if has_env(CLOUD_ENV_VARS["VERCEL"]) or has_env(CLOUD_ENV_VARS["VERCEL_ENV"]):
            return CloudProvider.VERCEL

        if has_env(CLOUD_ENV_VARS["NETLIFY"]) or has_env("NETLIFY_BUILD_BASE"):
            return CloudProvider.NETLIFY

        if has_env(CLOUD_ENV_VARS["CF_WORKER"]) or self._detect_cloudflare_workers():
            return CloudProvider.CLOUDFLARE_WORKERS

        if self._detect_aws():
            return CloudProvider.AWS_LAMBDA

        return None

    def _is_serverless(self, provider: Optional[CloudProvider]) -> bool:
        if provider is None:
            return False
        if provider in _ALWAYS_SERVERLESS:
            return True
        if provider in (CloudProvider.VERCEL, CloudProvider.NETLIFY):
            return any(has_env(var) for var in _FUNCTION_ENV_VARS)
        return False

    def _get_function_name(self, provider: Optional[CloudProvider]) -> Optional[str]:
        if provider == CloudProvider.AWS_LAMBDA:
            return _first_env(CLOUD_ENV_VARS["AWS_LAMBDA_FUNCTION_NAME"])
        if provider == CloudProvider.GOOGLE_CLOUD_FUNCTIONS:
            return _first_env(CLOUD_ENV_VARS["FUNCTION_NAME"], CLOUD_ENV_VARS["K_SERVICE"])
        if provider == CloudProvider.AZURE_FUNCTIONS:
            return _first_env(CLOUD_ENV_VARS["WEBSITE_SITE_NAME"])
        if provider == CloudProvider.VERCEL:
            return _first_env("VERCEL_FUNCTION")
        if provider == CloudProvider.NETLIFY:
            return _first_env("NETLIFY_FUNCTION_NAME")
        if provider == CloudProvider.CLOUDFLARE_WORKERS:
            return _first_env("CF_WORKER_NAME", "WORKER_NAME")
        return None

    def _get_region(self, provider: Optional[CloudProvider]) -> Optional[str]:
        if provider == CloudProvider.AWS_LAMBDA:
            return _first_env(CLOUD_ENV_VARS["AWS_REGION"], "AWS_DEFAULT_REGION")
        if provider == CloudProvider.GOOGLE_CLOUD_FUNCTIONS:
            return _first_env("FUNCTION_REGION", "GCP_REGION")
        if provider == CloudProvider.AZURE_FUNCTIONS:
            return _first_env("REGION_NAME", "AZURE_REGION")
        if provider == CloudProvider.VERCEL:
            return _first_env("VERCEL_REGION")
        if provider == CloudProvider.CLOUDFLARE_WORKERS:
            return _first_env("CF_REGION")
        return None

    def _detect_aws(self) -> bool:
        """Broader AWS heuristic: Lambda runtime variables, ECS metadata or an EC2 hypervisor"""
        if any(has_env(var) for var in AWS_RUNTIME_ENV_VARS):
            return True

        if any(has_env(var) for var in AWS_ECS_ENV_VARS):
            return True

        return file_exists(EC2_HYPERVISOR_UUID)

    def _detect_cloudflare_workers(self) -> bool:
        """Probe the JavaScript globals exposed to Python Workers

        Python Workers run on Pyodide, which reports the emscripten
        platform and exposes the JS global scope as the ``js`` module.
        """
        if get_platform() != "emscripten":
            return False

        try:
            js = importlib.import_module("js")

            caches = getattr(js, "caches", None)
            if caches is not None and getattr(caches, "default", None) is not None:
                return True

            if getattr(js, "CloudflareWorker", None) or getattr(js, "MINIFLARE", None):
                return True

            navigator = getattr(js, "navigator", None)
            if navigator is not None and getattr(navigator, "userAgent", None) == "Cloudflare-Workers":
                return True
        except Exception as e:
            logger.debug("Cloudflare runtime probe failed", error=str(e))

        return False
