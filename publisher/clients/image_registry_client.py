import re
import requests
import logging

logger = logging.getLogger(__name__)

DOCKERHUB_REGISTRY = "registry-1.docker.io"
MANIFEST_TYPES = ", ".join([
    "application/vnd.oci.image.index.v1+json",
    "application/vnd.docker.distribution.manifest.list.v2+json",
    "application/vnd.oci.image.manifest.v1+json",
    "application/vnd.docker.distribution.manifest.v2+json",
])
_CHALLENGE_PARAM = re.compile(r'(\w+)="([^"]*)"')


def split_image(image: str) -> tuple[str, str]:
    """Split an image name into registry host and repository path."""
    first, _, rest = image.partition("/")
    if rest and ("." in first or ":" in first or first == "localhost"):
        return first, rest
    if not rest:
        return DOCKERHUB_REGISTRY, f"library/{image}"
    return DOCKERHUB_REGISTRY, image


class ImageRegistryClient:
    def __init__(self, credentials: dict[str, tuple[str, str]] | None = None, timeout: int = 10):
        self.credentials: dict[str, tuple[str, str]] = credentials or {}
        self.timeout: int = timeout

    def platforms(self, image: str, tag: str) -> list[str]:
        """Return the platforms listed by the manifest list behind image:tag."""
        response = self._request("get", image, tag)
        if response.status_code != 200:
            raise RuntimeError(f"Failed to fetch manifest {image}:{tag} (status code {response.status_code})")
        manifest = response.json()
        if "manifests" not in manifest:
            logger.warning(f"{image}:{tag} is a single-platform manifest")
            return []
        platforms = []
        for entry in manifest["manifests"]:
            platform = entry.get("platform") or {}
            os_name, arch = platform.get("os"), platform.get("architecture")
            # attestation manifests are listed as unknown/unknown
            if not os_name or not arch or arch == "unknown":
                continue
            parts = [os_name, arch, platform.get("variant")]
            platforms.append("/".join(p for p in parts if p))
        return platforms

    def resolve_digest(self, image: str, tag: str) -> str | None:
        """Return the content digest the registry reports for image:tag."""
        response = self._request("head", image, tag)
        if response.status_code != 200:
            raise RuntimeError(f"Failed to resolve {image}:{tag} (status code {response.status_code})")
        digest = response.headers.get("Docker-Content-Digest")
        if not digest:
            logger.warning(f"Registry returned no digest for {image}:{tag}")
        return digest

    def _request(self, method: str, image: str, tag: str) -> requests.Response:
        registry, path = split_image(image)
        url = f"https://{registry}/v2/{path}/manifests/{tag}"
        headers = {"Accept": MANIFEST_TYPES}
        response = getattr(requests, method)(url=url, headers=headers, timeout=self.timeout)
        challenge = response.headers.get("WWW-Authenticate", "")
        if response.status_code == 401 and challenge.lower().startswith("bearer "):
            headers["Authorization"] = f"Bearer {self._token(registry, challenge)}"
            response = getattr(requests, method)(url=url, headers=headers, timeout=self.timeout)
        return response

    def _token(self, registry: str, challenge: str) -> str:
        params = dict(_CHALLENGE_PARAM.findall(challenge))
        realm = params.pop("realm", None)
        if not realm:
            raise RuntimeError(f"Registry {registry} sent a challenge without realm")
        response = requests.get(realm, params=params, auth=self.credentials.get(registry), timeout=self.timeout)
        response.raise_for_status()
        body = response.json()
        token = body.get("token") or body.get("access_token")
        if not token:
            raise RuntimeError(f"Registry {registry} did not return a token")
        return token
