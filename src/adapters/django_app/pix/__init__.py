"""
Adapter Django do domínio PIX: models, repositórios, forms e API JSON.
"""
