"""Access control: scope predicates, filter composition, paging and write guards."""
