"""Configuration keys read during executor composition.

Keys are dotted Spark-style names. Defaults live next to the key they
apply to; a key without a default is optional and absence is meaningful.
"""

from __future__ import annotations

# =============================================================================
# Control plane
# =============================================================================

MASTER = "spark.master"
KUBERNETES_NAMESPACE = "spark.kubernetes.namespace"
DEFAULT_NAMESPACE = "default"

# =============================================================================
# Executor secrets (shared by executor and init-container mounts)
# =============================================================================

EXECUTOR_SECRETS_PREFIX = "spark.kubernetes.executor.secrets."

# =============================================================================
# Submitted small files
# =============================================================================

EXECUTOR_SUBMITTED_SMALL_FILES_SECRET = (
    "spark.kubernetes.mountdependencies.smallfiles.executor.secretName"
)
EXECUTOR_SUBMITTED_SMALL_FILES_SECRET_MOUNT_PATH = (
    "spark.kubernetes.mountdependencies.smallfiles.executor.secretMountPath"
)

# =============================================================================
# Init container
# =============================================================================

EXECUTOR_INIT_CONTAINER_CONFIG_MAP = "spark.kubernetes.initcontainer.executor.configmapname"
EXECUTOR_INIT_CONTAINER_CONFIG_MAP_KEY = "spark.kubernetes.initcontainer.executor.configmapkey"

INIT_CONTAINER_DOCKER_IMAGE = "spark.kubernetes.initcontainer.docker.image"
DEFAULT_INIT_CONTAINER_DOCKER_IMAGE = "spark-init:latest"

DOCKER_IMAGE_PULL_POLICY = "spark.kubernetes.docker.image.pullPolicy"
DEFAULT_DOCKER_IMAGE_PULL_POLICY = "IfNotPresent"

INIT_CONTAINER_JARS_DOWNLOAD_LOCATION = "spark.kubernetes.mountdependencies.jarsDownloadDir"
DEFAULT_JARS_DOWNLOAD_LOCATION = "/var/spark-data/spark-jars"

INIT_CONTAINER_FILES_DOWNLOAD_LOCATION = "spark.kubernetes.mountdependencies.filesDownloadDir"
DEFAULT_FILES_DOWNLOAD_LOCATION = "/var/spark-data/spark-files"

INIT_CONTAINER_MOUNT_TIMEOUT = "spark.kubernetes.mountdependencies.timeout"
DEFAULT_MOUNT_TIMEOUT = "300s"

EXECUTOR_INIT_CONTAINER_SECRET = "spark.kubernetes.initcontainer.executor.stagingServerSecret.name"
EXECUTOR_INIT_CONTAINER_SECRET_MOUNT_DIR = (
    "spark.kubernetes.initcontainer.executor.stagingServerSecret.mountDir"
)

# =============================================================================
# Hadoop / Kerberos
# =============================================================================

HADOOP_CONFIG_MAP = "spark.kubernetes.hadoop.executor.hadoopConfigMapName"
HADOOP_CONF_DIR = "spark.kubernetes.hadoop.conf.dir"
KERBEROS_KEYTAB_SECRET_NAME = "spark.kubernetes.kerberos.key.tab.secret.name"
KERBEROS_KEYTAB_SECRET_KEY = "spark.kubernetes.kerberos.key.tab.secret.key"

# =============================================================================
# External shuffle service
# =============================================================================

SHUFFLE_SERVICE_ENABLED = "spark.shuffle.service.enabled"
SHUFFLE_NAMESPACE = "spark.kubernetes.shuffle.namespace"
SHUFFLE_LABELS = "spark.kubernetes.shuffle.labels"
NETWORK_AUTHENTICATE = "spark.authenticate"

# =============================================================================
# Mounted client credentials (suffixes under the driver auth prefix)
# =============================================================================

OAUTH_TOKEN_CONF_SUFFIX = "oauthToken"
OAUTH_TOKEN_FILE_CONF_SUFFIX = "oauthTokenFile"
CA_CERT_FILE_CONF_SUFFIX = "caCertFile"
CLIENT_KEY_FILE_CONF_SUFFIX = "clientKeyFile"
CLIENT_CERT_FILE_CONF_SUFFIX = "clientCertFile"
