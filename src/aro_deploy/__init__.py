"""aro-deploy: Azure Red Hat OpenShift cluster lifecycle driver.

Provisions, inspects and tears down an ARO cluster that uses managed
identities by sequencing Azure CLI calls.
"""

from aro_deploy.version import __version__

__all__: list[str] = ["__version__"]
