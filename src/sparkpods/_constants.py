"""Shared constants for sparkpods."""

# Service-account credentials mounted into every pod by the kubelet.
# The token file doubles as the in-cluster marker.
SERVICE_ACCOUNT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"
SERVICE_ACCOUNT_CA_CRT_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"

# API server address as seen from inside the cluster
KUBERNETES_MASTER_INTERNAL_URL = "https://kubernetes.default.svc"

# Scheme prefix on spark.master for Kubernetes masters
K8S_MASTER_PREFIX = "k8s://"

# Settings prefix for credentials mounted into the driver pod
APISERVER_AUTH_DRIVER_MOUNTED_CONF_PREFIX = "spark.kubernetes.authenticate.driver.mounted"

# Pod role label value for executors
SPARK_POD_EXECUTOR_ROLE = "executor"

# Default config file name for CLI auto-discovery
DEFAULT_CONFIG = "sparkpods.yaml"
