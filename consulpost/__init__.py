"""consulpost: publish build-artifact metadata to Consul's key/value store.

Runs as a post-processing step after an image build. Each unit of a
multi-region artifact id (``us-east-1:ami-111,us-west-2:ami-222``) becomes
one record in Consul, carrying the artifact's metadata merged with the
operator's configured metadata.
"""

__version__ = "0.1.0"
__description__ = "Post-build artifact metadata publisher for Consul KV"

from consulpost.core.post_processor import ConsulPostProcessor
from consulpost.models.artifacts import BuildArtifact

__all__ = ["ConsulPostProcessor", "BuildArtifact", "__version__"]
