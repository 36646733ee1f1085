"""
Embedded provider and region catalogue.

Used directly when no provider service is configured and as the fallback
when the provider service cannot be reached.
"""
from typing import Dict, List, Optional


PROVIDERS: List[Dict[str, str]] = [
    {
        "id": "aws",
        "name": "Amazon Web Services",
        "description": "Amazon Web Services (AWS) is a comprehensive cloud computing platform provided by Amazon.",
    },
    {
        "id": "azure",
        "name": "Microsoft Azure",
        "description": "Microsoft Azure is a cloud computing service created by Microsoft for building, "
                       "testing, deploying, and managing applications and services.",
    },
    {
        "id": "gcp",
        "name": "Google Cloud Platform",
        "description": "Google Cloud Platform (GCP) is a suite of cloud computing services that runs on "
                       "the same infrastructure that Google uses internally.",
    },
    {
        "id": "ibm",
        "name": "IBM Cloud",
        "description": "IBM Cloud offers compute, storage, networking, database, and AI services, with "
                       "particular strengths in hybrid cloud solutions and enterprise integration.",
    },
    {
        "id": "oracle",
        "name": "Oracle Cloud",
        "description": "Oracle Cloud provides cloud applications, platform services, and engineered "
                       "systems with a focus on database and enterprise applications.",
    },
    {
        "id": "alibaba",
        "name": "Alibaba Cloud",
        "description": "Alibaba Cloud, also known as Aliyun, offers cloud computing services globally, "
                       "with particular strength in Asia Pacific regions and e-commerce solutions.",
    },
    {
        "id": "digitalocean",
        "name": "DigitalOcean",
        "description": "DigitalOcean is a cloud computing platform that provides an easy-to-use "
                       "interface for developers to deploy and scale applications.",
    },
]


def _region(region_id: str, name: str, location: str, continent: str) -> Dict[str, str]:
    return {"id": region_id, "name": name, "location": location, "continent": continent}


REGIONS: Dict[str, List[Dict[str, str]]] = {
    "aws": [
        _region("us-east-1", "US East (N. Virginia)", "Virginia, USA", "North America"),
        _region("us-west-2", "US West (Oregon)", "Oregon, USA", "North America"),
        _region("eu-west-1", "Europe (Ireland)", "Dublin, Ireland", "Europe"),
        _region("ap-southeast-1", "Asia Pacific (Singapore)", "Singapore", "Asia"),
        _region("ap-northeast-1", "Asia Pacific (Tokyo)", "Tokyo, Japan", "Asia"),
    ],
    "azure": [
        _region("eastus", "East US", "Virginia, USA", "North America"),
        _region("westus2", "West US 2", "Washington, USA", "North America"),
        _region("westeurope", "West Europe", "Netherlands", "Europe"),
        _region("southeastasia", "Southeast Asia", "Singapore", "Asia"),
        _region("japaneast", "Japan East", "Tokyo, Japan", "Asia"),
    ],
    "gcp": [
        _region("us-central1", "Iowa (us-central1)", "Iowa, USA", "North America"),
        _region("us-west1", "Oregon (us-west1)", "Oregon, USA", "North America"),
        _region("europe-west1", "Belgium (europe-west1)", "Belgium", "Europe"),
        _region("asia-southeast1", "Singapore (asia-southeast1)", "Singapore", "Asia"),
        _region("asia-northeast1", "Tokyo (asia-northeast1)", "Tokyo, Japan", "Asia"),
    ],
    "ibm": [
        _region("us-south", "Dallas", "Dallas, Texas, USA", "North America"),
        _region("us-east", "Washington DC", "Washington DC, USA", "North America"),
        _region("eu-gb", "London", "London, UK", "Europe"),
        _region("eu-de", "Frankfurt", "Frankfurt, Germany", "Europe"),
        _region("jp-tok", "Tokyo", "Tokyo, Japan", "Asia"),
    ],
    "oracle": [
        _region("us-ashburn-1", "US East (Ashburn)", "Ashburn, Virginia, USA", "North America"),
        _region("us-phoenix-1", "US West (Phoenix)", "Phoenix, Arizona, USA", "North America"),
        _region("uk-london-1", "UK South (London)", "London, UK", "Europe"),
        _region("eu-frankfurt-1", "Germany Central (Frankfurt)", "Frankfurt, Germany", "Europe"),
        _region("ap-tokyo-1", "Japan East (Tokyo)", "Tokyo, Japan", "Asia"),
    ],
    "alibaba": [
        _region("us-west-1", "Silicon Valley", "Silicon Valley, California, USA", "North America"),
        _region("eu-central-1", "Frankfurt", "Frankfurt, Germany", "Europe"),
        _region("cn-hangzhou", "Hangzhou", "Hangzhou, China", "Asia"),
        _region("ap-southeast-1", "Singapore", "Singapore", "Asia"),
        _region("ap-northeast-1", "Tokyo", "Tokyo, Japan", "Asia"),
    ],
    "digitalocean": [
        _region("nyc1", "New York 1", "New York, USA", "North America"),
        _region("sfo3", "San Francisco 3", "San Francisco, USA", "North America"),
        _region("tor1", "Toronto 1", "Toronto, Canada", "North America"),
        _region("lon1", "London 1", "London, UK", "Europe"),
        _region("fra1", "Frankfurt 1", "Frankfurt, Germany", "Europe"),
        _region("ams3", "Amsterdam 3", "Amsterdam, Netherlands", "Europe"),
        _region("sgp1", "Singapore 1", "Singapore", "Asia"),
        _region("blr1", "Bangalore 1", "Bangalore, India", "Asia"),
    ],
}

DEFAULT_REGIONS: Dict[str, str] = {
    "aws": "us-east-1",
    "azure": "eastus",
    "gcp": "us-central1",
    "ibm": "us-south",
    "oracle": "us-ashburn-1",
    "alibaba": "us-west-1",
    "digitalocean": "nyc1",
}


def get_provider(provider_id: str) -> Optional[Dict[str, str]]:
    """Return a catalogue provider entry, or None for an unknown id."""
    for provider in PROVIDERS:
        if provider["id"] == provider_id:
            return dict(provider)
    return None


def get_regions(provider_id: str) -> Optional[List[Dict[str, str]]]:
    """Return the catalogue regions for a provider, or None for an unknown id."""
    regions = REGIONS.get(provider_id)
    if regions is None:
        return None
    return [dict(region) for region in regions]
