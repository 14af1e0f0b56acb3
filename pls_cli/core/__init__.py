"""
Core decision engine.

Raw tokens flow through the classifier, which decides what is the URL and
what is the output, then the resolver, which turns that into a concrete
destination, then dispatch, which hands the work to a collaborator.
"""
