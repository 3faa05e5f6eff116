from enum import Enum


class RegistryCategory(Enum):
    """Each registry category has its own way of listing and deleting tags.
    Both current categories talk to Azure Container Registry; they differ in
    whether the Azure CLI or the REST API does the talking.
    """

    AZ_CLI = "az"
    ACR = "azurecr.io"
