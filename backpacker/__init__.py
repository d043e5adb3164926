"""Around-the-world backpacker game: FSM-driven game loop over an LLM and Wikipedia."""
