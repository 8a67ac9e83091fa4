"""Infrastructure: external API clients and document store repositories"""
