# core/predefined_pages.py

# Pages of the public site that always exist, with the metadata they
# fall back to when no custom SEO row has been saved.
PREDEFINED_PAGES = [
    {
        "path": "/",
        "default_slug": "home",
        "category": "main",
        "default_title": "Altiora Infotech - AI, Web3 & Growth Engineering Solutions",
        "default_description": "Leading AI, Web3, and growth engineering solutions for modern businesses. Transform your digital presence with cutting-edge technology.",
    },
    {
        "path": "/about",
        "default_slug": "about-us",
        "category": "about",
        "default_title": "About Altiora Infotech - Innovation & Excellence",
        "default_description": "Learn about Altiora Infotech's mission to deliver innovative AI, Web3, and growth engineering solutions for businesses worldwide.",
    },
    {
        "path": "/services",
        "default_slug": "services",
        "category": "main",
        "default_title": "Services - AI, Web3 & Development Solutions | Altiora Infotech",
        "default_description": "Comprehensive AI, Web3, and development services to transform your business with cutting-edge technology solutions.",
    },
    {
        "path": "/projects",
        "default_slug": "projects",
        "category": "main",
        "default_title": "Projects - Portfolio & Case Studies | Altiora Infotech",
        "default_description": "Explore our portfolio of successful AI, Web3, and development projects with detailed case studies and results.",
    },
    {
        "path": "/blog",
        "default_slug": "blog",
        "category": "blog",
        "default_title": "Blog - Insights on AI, Web3 & Growth | Altiora Infotech",
        "default_description": "Read the latest insights, tutorials, and industry news on AI, Web3, blockchain, and growth engineering from the Altiora Infotech team.",
    },
    {
        "path": "/contact",
        "default_slug": "contact",
        "category": "contact",
        "default_title": "Contact Altiora Infotech - Start Your Project",
        "default_description": "Get in touch with Altiora Infotech to discuss your AI, Web3, or growth engineering project. Our experts respond within one business day.",
    },
    {
        "path": "/services/ai-ml",
        "default_slug": "ai-ml",
        "category": "services",
        "default_title": "AI & Machine Learning Development Services | Altiora Infotech",
        "default_description": "Custom AI and machine learning solutions including LLM integration, computer vision, predictive analytics, and intelligent automation.",
    },
    {
        "path": "/services/web3",
        "default_slug": "web3",
        "category": "services",
        "default_title": "Web3 & Blockchain Development Services | Altiora Infotech",
        "default_description": "End-to-end Web3 development: smart contracts, dApps, DeFi platforms, NFT marketplaces, and blockchain consulting for growing businesses.",
    },
]

PREDEFINED_BY_PATH = {page["path"]: page for page in PREDEFINED_PAGES}
