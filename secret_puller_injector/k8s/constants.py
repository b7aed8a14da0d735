"""K8s constants used across the injector modules.

This module contains the fixed names, images and paths of the injected
secret puller so the factory, the mutator and the tests agree on them.
"""

# Opt-in annotation on the pod template (or Pod) metadata; exact value "true"
INJECTOR_ANNOTATION = "secret-puller-injector.admission"
INJECTOR_ANNOTATION_VALUE = "true"

# Init container
SECRET_PULLER_IMAGE = "zendesk/samson_secret_puller:latest"
INIT_CONTAINER_NAME = "samson-secret-puller"
IMAGE_PULL_POLICY = "IfNotPresent"
INIT_CONTAINER_CPU = "1000m"
INIT_CONTAINER_MEMORY = "1G"

# Environment passed to the init container
VAULT_ADDR_ENV = "VAULT_ADDR"
VAULT_SSL_VERIFY_ENV = "VAULT_SSL_VERIFY"

# Volumes
SECRET_VOLUME_NAME = "secrets"
SECRET_MOUNT_PATH = "/secrets"
VAULT_AUTH_VOLUME_NAME = "vault-auth"
VAULT_AUTH_MOUNT_PATH = "/vault-auth"
SECRET_KEYS_VOLUME_NAME = "secret-keys"
SECRET_KEYS_MOUNT_PATH = "/secretkeys"

# Pre-provisioned secret holding the vault auth material
VAULT_AUTH_SECRET_NAME = "vaultauth"

# Kinds whose pod spec lives at spec.template.spec
POD_TEMPLATE_KINDS = {"Deployment", "StatefulSet", "DaemonSet", "ReplicaSet", "Job"}
POD_KIND = "Pod"
SUPPORTED_KINDS = POD_TEMPLATE_KINDS | {POD_KIND}
